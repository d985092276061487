#!/usr/bin/env python3
"""
Aby Database Initialization Script
Creates database tables and the first administrator account
"""
import sys
from pathlib import Path

# Add parent directory to path to import the package when run from a checkout
sys.path.append(str(Path(__file__).parent.parent))

from aby_api.core.config import settings
from aby_api.core.database import SessionLocal, check_db_connection, init_db
from aby_api.core.logging import get_logger, setup_logging
from aby_api.schemas.auth import AdminCreate
from aby_api.services.auth_service import AuthService

setup_logging()
logger = get_logger("scripts.init_db")


def create_first_admin():
    """Create the administrator named in settings unless it already exists"""
    db = SessionLocal()
    try:
        service = AuthService(db)
        if service.get_admin_by_email(settings.FIRST_ADMIN_EMAIL):
            logger.info(f"Admin {settings.FIRST_ADMIN_EMAIL} already exists")
            return

        service.create_admin(AdminCreate(
            names="Administrator",
            email=settings.FIRST_ADMIN_EMAIL,
            password=settings.FIRST_ADMIN_PASSWORD,
        ))
        logger.warning("First admin created with the configured password; change it after signing in")
    finally:
        db.close()


def main():
    if not check_db_connection():
        logger.error("Cannot reach the database; check DATABASE_URL")
        sys.exit(1)

    init_db()
    create_first_admin()
    logger.info("Database initialization completed")


if __name__ == "__main__":
    main()
