from sqlalchemy import Column, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from eventhub.database import Base
from eventhub.models.utils import utcnow


class EventParticipant(Base):
    __tablename__ = "event_participants"

    # Composite key: one participation per user per event
    event_id = Column(Uuid, ForeignKey("events.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    registered_at = Column(DateTime, nullable=False, default=utcnow)

    # Relationships
    event = relationship("Event", back_populates="participants")
    user = relationship("User", back_populates="participations")
