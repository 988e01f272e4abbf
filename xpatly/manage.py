#!/usr/bin/env python3
"""
Database management commands.
Creates and drops tables and bootstraps the first super admin, who can then
assign staff roles through the admin API.

Usage:
    python -m xpatly.manage create-tables
    python -m xpatly.manage create-admin --email admin@xpatly.ee --password 'S3curePass'
    python -m xpatly.manage drop-tables
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from xpatly.database import AsyncSessionLocal, close_db_connection, create_tables, drop_tables
from xpatly.models.user import User, UserRole, UserType
from xpatly.repositories.user import UserRepository
from xpatly.utils.validators import ValidationUtils

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def create_super_admin(
    session: AsyncSession,
    email: str,
    password: str,
    full_name: Optional[str] = None
) -> User:
    """
    Create a verified super admin, or promote the existing account with that email.

    Args:
        session: Database session
        email: Admin email address
        password: Plain text password, only used for a new account
        full_name: Optional display name

    Returns:
        The super admin user

    Raises:
        ValueError: If the email or password is invalid
    """
    repo = UserRepository(session)

    existing = await repo.get_by_email(email)
    if existing:
        if existing.role == UserRole.SUPER_ADMIN:
            logger.info(f"{existing.email} is already a super admin, skipping")
            return existing
        user = await repo.update(existing, {
            "role": UserRole.SUPER_ADMIN,
            "is_verified": True,
            "is_approved": True,
            "is_banned": False,
        })
        logger.info(f"Promoted {user.email} to super admin")
        return user

    ValidationUtils.validate_password_strength(password)
    user = await repo.create_user({
        "email": email,
        "password": password,
        "full_name": full_name or "System Administrator",
        "role": UserRole.SUPER_ADMIN,
        "user_type": UserType.BOTH,
        "is_verified": True,
        "is_approved": True,
    })
    logger.info(f"Super admin created: {user.email}")
    return user


async def _create_admin(args: argparse.Namespace) -> None:
    async with AsyncSessionLocal() as session:
        await create_super_admin(session, args.email, args.password, args.full_name)


async def _run(args: argparse.Namespace) -> None:
    try:
        if args.command == "create-tables":
            await create_tables()
        elif args.command == "drop-tables":
            await drop_tables()
        elif args.command == "create-admin":
            await _create_admin(args)
    finally:
        await close_db_connection()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Xpatly database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("create-tables", help="Create all database tables")
    subparsers.add_parser("drop-tables", help="Drop all tables (development and testing only)")

    admin_parser = subparsers.add_parser("create-admin", help="Create or promote a super admin")
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)
    admin_parser.add_argument("--full-name", dest="full_name")

    return parser


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        asyncio.run(_run(args))
    except (ValueError, RuntimeError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
