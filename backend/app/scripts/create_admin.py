"""
Create Admin User Script
Creates an admin (or moderator) user, or promotes an existing one.
Usage: python -m app.scripts.create_admin [--role moderator]

Reads ADMIN_USERNAME, ADMIN_EMAIL and ADMIN_PASSWORD from the environment.
"""

import argparse
import asyncio
import logging
import os
import sys
from sqlalchemy import or_, select

from app.config import get_settings
from app.database import build_engine, build_session_factory
from app.logging_config import setup_logging
from app.models.user import User, UserRole
from app.schemas.user import normalize_email
from app.services import auth_service
from app.utils.password_policy import validate_password

logger = logging.getLogger("app.scripts.create_admin")


async def create_admin(role: UserRole) -> int:
    username = os.getenv("ADMIN_USERNAME", "admin")
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        logger.error("ADMIN_EMAIL and ADMIN_PASSWORD are required.")
        return 1

    try:
        email = normalize_email(email)
    except ValueError as e:
        logger.error(f"ADMIN_EMAIL is invalid: {e}")
        return 1

    settings = get_settings()
    engine = build_engine(settings)
    session_factory = build_session_factory(engine)

    try:
        async with session_factory() as db:
            result = await db.execute(
                select(User).where(or_(User.username == username, User.email == email))
            )
            existing = result.scalars().first()

            if existing:
                if existing.role == role:
                    logger.info(f"User {existing.username} already has role {role.value}.")
                else:
                    existing.role = role
                    await db.commit()
                    logger.info(f"Promoted {existing.username} to {role.value}.")
                return 0

            errors = validate_password(password)
            if errors:
                logger.error("ADMIN_PASSWORD does not meet password policy:")
                for err in errors:
                    logger.error(f"- {err}")
                return 1

            db.add(User(
                username=username,
                email=email,
                hashed_password=auth_service.get_password_hash(password),
                role=role,
            ))
            await db.commit()
            logger.info(f"Successfully created {role.value} user: {username}")
            return 0
    finally:
        await engine.dispose()


def main() -> int:
    parser = argparse.ArgumentParser(description="Create or promote a privileged user")
    parser.add_argument(
        "--role",
        choices=[UserRole.ADMIN.value, UserRole.MODERATOR.value],
        default=UserRole.ADMIN.value,
    )
    args = parser.parse_args()

    setup_logging()
    return asyncio.run(create_admin(UserRole(args.role)))


if __name__ == "__main__":
    sys.exit(main())
