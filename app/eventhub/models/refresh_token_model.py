import uuid
from sqlalchemy import Boolean, Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from eventhub.database import Base
from eventhub.models.utils import utcnow


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    token = Column(String(128), nullable=False, unique=True, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    is_revoked = Column(Boolean, nullable=False, default=False)
    added_at = Column(DateTime, nullable=False, default=utcnow)
    expires_at = Column(DateTime, nullable=False)

    # Relationships
    user = relationship("User", back_populates="refresh_tokens")

    def is_expired(self, now=None) -> bool:
        return self.expires_at < (now or utcnow())

    def __repr__(self):
        return f"<RefreshToken id={self.id} user_id={self.user_id} revoked={self.is_revoked}>"
