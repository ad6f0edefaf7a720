#!/usr/bin/env python3
"""
Inspect accounts and change roles out-of-band.

Roles are never changed through the API; this is the only way to grant or
revoke admin rights.

Usage:
    # Show an account
    uv run python scripts/manage_users.py show user@example.com

    # Grant admin
    uv run python scripts/manage_users.py set-role user@example.com admin

    # List all admins
    uv run python scripts/manage_users.py list-admins
"""

import argparse
import asyncio

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import UserRole, settings
from app.core.database import Database
from app.models.user import Users

ROLES = (UserRole.USER, UserRole.ADMIN)


async def find_user(db: AsyncSession, email: str) -> Users | None:
    result = await db.execute(
        select(Users).where(func.lower(Users.email) == email.lower())  # type: ignore[arg-type]
    )
    return result.scalar_one_or_none()


async def set_role(db: AsyncSession, email: str, role: str) -> Users | None:
    """
    Change the stored role of the account with ``email``.

    Takes effect on the user's next request; session tokens are not reissued.

    Returns:
        Updated user, or None if no account has that email
    """
    if role not in ROLES:
        raise ValueError(f"Unknown role {role!r}; expected one of {', '.join(ROLES)}")

    user = await find_user(db, email)
    if user is None:
        return None
    user.role = role
    await db.commit()
    return user


async def list_admins(db: AsyncSession) -> list[Users]:
    result = await db.execute(
        select(Users).where(Users.role == UserRole.ADMIN).order_by(Users.email)  # type: ignore[arg-type]
    )
    return list(result.scalars().all())


def print_user(user: Users) -> None:
    created = user.created_at.strftime("%Y-%m-%d") if user.created_at else "Unknown"
    print(f"{user.id:<34} {user.email:<40} {user.role:<8} {created}")


async def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect accounts and change roles")
    subparsers = parser.add_subparsers(dest="command", required=True)

    show = subparsers.add_parser("show", help="Show one account")
    show.add_argument("email")

    set_role_parser = subparsers.add_parser("set-role", help="Change an account's role")
    set_role_parser.add_argument("email")
    set_role_parser.add_argument("role", choices=ROLES)

    subparsers.add_parser("list-admins", help="List every admin account")

    args = parser.parse_args()

    database = Database.from_settings(settings)
    try:
        async with database.session() as db:
            if args.command == "show":
                user = await find_user(db, args.email)
                if user is None:
                    print(f"\nERROR: No user with email {args.email}")
                    return
                print_user(user)

            elif args.command == "set-role":
                user = await set_role(db, args.email, args.role)
                if user is None:
                    print(f"\nERROR: No user with email {args.email}")
                    return
                print(f"✓ {user.email} is now {user.role}")

            elif args.command == "list-admins":
                admins = await list_admins(db)
                if not admins:
                    print("No admin accounts")
                for user in admins:
                    print_user(user)
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
