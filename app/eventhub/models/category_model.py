import uuid
from sqlalchemy import Column, String, Uuid
from sqlalchemy.orm import relationship
from eventhub.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, unique=True)

    events = relationship("Event", back_populates="category", passive_deletes="all")
