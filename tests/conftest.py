import os
from datetime import date, timedelta

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("COOKIE_SECURE", "false")

import pytest
from sqlalchemy import create_engine, event as sa_event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from eventhub.constant_file import ROLE_ADMIN, ROLE_USER
from eventhub.cryptography import hash_password
from eventhub.database import Base
from eventhub.file_storage import FileStorageService

# All mapped classes must be registered before create_all
from eventhub.models.category_model import Category
from eventhub.models.event_model import Event
from eventhub.models.image_model import Image
from eventhub.models.participant_model import EventParticipant
from eventhub.models.refresh_token_model import RefreshToken
from eventhub.models.user_model import Role, User
from eventhub.models.utils import utcnow
from eventhub.seed import seed_roles
from eventhub.token_issuer import TokenIssuer

TEST_PASSWORD = "Secret123!"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @sa_event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    seed_roles(session)
    session.commit()
    yield session
    session.close()


@pytest.fixture
def issuer():
    return TokenIssuer(
        secret_key=os.environ["JWT_SECRET_KEY"],
        access_token_expires=timedelta(minutes=15),
        refresh_token_expires=timedelta(days=7),
    )


@pytest.fixture
def storage(tmp_path):
    return FileStorageService(str(tmp_path / "uploads"))


@pytest.fixture
def make_user(db):
    def _make_user(email="user@example.com", roles=(ROLE_USER,), first_name="Jane", last_name="Doe"):
        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email,
            date_of_birth=date(1990, 5, 17),
        )
        user.password_hash = hash_password(user, TEST_PASSWORD)
        user.roles = db.query(Role).filter(Role.name.in_(roles)).all()
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def make_category(db):
    def _make_category(name="Music"):
        category = Category(name=name)
        db.add(category)
        db.commit()
        return category

    return _make_category


@pytest.fixture
def make_event(db, make_category):
    def _make_event(name="Concert", category=None, max_participants=10, days_ahead=30, location="Sarajevo"):
        category = category or make_category()
        event = Event(
            name=name,
            description=f"{name} description",
            date_time=utcnow() + timedelta(days=days_ahead),
            location=location,
            max_participants=max_participants,
            category_id=category.id,
        )
        db.add(event)
        db.commit()
        return event

    return _make_event


@pytest.fixture
def admin_user(make_user):
    return make_user(email="admin@example.com", roles=(ROLE_ADMIN, ROLE_USER), first_name="Admin", last_name="Admin")
