import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from eventhub.database import Base
from eventhub.models.utils import utcnow


class Image(Base):
    __tablename__ = "images"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    stored_path = Column(String, nullable=False)
    content_type = Column(String(100), nullable=False)
    uploaded_at = Column(DateTime, nullable=False, default=utcnow)

    event_id = Column(Uuid, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, unique=True)

    event = relationship("Event", back_populates="image")
