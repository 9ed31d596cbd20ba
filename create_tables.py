#!/usr/bin/env python3
"""
Create the database tables and seed roles plus the default admin.
Run this once the database exists; the application does the same on startup.
"""
import os
import sys

# Add the app directory to the path
app_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "app")
sys.path.insert(0, app_dir)

from sqlalchemy.exc import SQLAlchemyError

from eventhub.database import Base, SessionLocal, engine
from eventhub.logger import get_logger
from eventhub.seed import initialize_database

# Every mapped class must be imported before create_all
from eventhub.models.user_model import Role, User
from eventhub.models.refresh_token_model import RefreshToken
from eventhub.models.category_model import Category
from eventhub.models.event_model import Event
from eventhub.models.image_model import Image
from eventhub.models.participant_model import EventParticipant

logger = get_logger("eventhub.create_tables")


def create_tables() -> bool:
    try:
        Base.metadata.create_all(bind=engine)
        db = SessionLocal()
        try:
            initialize_database(db)
        finally:
            db.close()
    except (SQLAlchemyError, RuntimeError):
        logger.exception("create_tables_failed")
        return False

    logger.info("tables_created", tables=sorted(Base.metadata.tables))
    return True


if __name__ == "__main__":
    sys.exit(0 if create_tables() else 1)
