from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from eventhub import constant_file
from eventhub.cryptography import hash_password
from eventhub.logger import get_logger
from eventhub.models.user_model import Role, User

logger = get_logger(__name__)


def seed_roles(db: Session) -> None:
    existing = {name for (name,) in db.query(Role.name).all()}
    for name in constant_file.DEFAULT_ROLES:
        if name not in existing:
            db.add(Role(name=name))
    db.flush()


def seed_admin(db: Session, email: str, password: str) -> None:
    if db.query(User).filter(User.email == email).first():
        return

    roles = db.query(Role).filter(Role.name.in_(constant_file.DEFAULT_ROLES)).all()
    admin = User(
        first_name="Admin",
        last_name="Admin",
        email=email,
        date_of_birth=date(2000, 1, 1),
    )
    admin.password_hash = hash_password(admin, password)
    admin.roles = roles
    db.add(admin)
    db.flush()
    logger.info("admin_seeded", email=email)


def initialize_database(db: Session, admin_email: str = None, admin_password: str = None) -> None:
    """Seed roles and the default admin in one transaction.

    Roles are a hard precondition for registration, so any failure here is
    re-raised and stops the application.
    """
    admin_email = admin_email or constant_file.admin_email
    admin_password = admin_password if admin_password is not None else constant_file.admin_password

    try:
        seed_roles(db)
        if admin_password:
            seed_admin(db, admin_email.lower(), admin_password)
        else:
            logger.warning("admin_seed_skipped", reason="ADMIN_PASSWORD is not set")
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("database_initialization_failed")
        raise

    missing = set(constant_file.DEFAULT_ROLES) - {name for (name,) in db.query(Role.name).all()}
    if missing:
        raise RuntimeError(f"Required roles are missing after seeding: {sorted(missing)}")
