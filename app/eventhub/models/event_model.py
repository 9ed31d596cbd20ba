import uuid
from sqlalchemy import CheckConstraint, Column, Integer, String, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from eventhub.database import Base


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("max_participants > 0", name="ck_events_max_participants_positive"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    date_time = Column(DateTime, nullable=False, index=True)
    location = Column(String(300), nullable=False)
    max_participants = Column(Integer, nullable=False)

    category_id = Column(Uuid, ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False)

    # Relationships
    category = relationship("Category", back_populates="events")
    image = relationship("Image", back_populates="event", uselist=False, cascade="all, delete-orphan")
    participants = relationship("EventParticipant", back_populates="event", cascade="all, delete-orphan")
