import uuid
from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Table, Uuid
from sqlalchemy.orm import relationship
from eventhub.database import Base
from eventhub.models.utils import utcnow

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Uuid, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    __tablename__ = "roles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False, unique=True, index=True)

    users = relationship("User", secondary=user_roles, back_populates="roles")


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(254), nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    date_of_birth = Column(Date, nullable=False)
    registered_at = Column(DateTime, nullable=False, default=utcnow)

    # Relationships
    roles = relationship("Role", secondary=user_roles, back_populates="users")
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan")
    participations = relationship("EventParticipant", back_populates="user", cascade="all, delete-orphan")

    @property
    def role_names(self) -> list[str]:
        return [role.name for role in self.roles]
