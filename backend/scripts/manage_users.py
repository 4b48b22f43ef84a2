#!/usr/bin/env python3
"""
Admin script to manage users.

Usage:
    python scripts/manage_users.py add-user --username officer1 --password SecurePass123!
    python scripts/manage_users.py list-users
    python scripts/manage_users.py set-rank --username officer1 --rank ADMIN
    python scripts/manage_users.py grant-permission --username officer1 --permission Leo
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cad_api.database import async_session_maker, init_db
from cad_api.models.user import User, UserRank
from cad_api.permissions import Permission
from cad_api.services.auth import AuthService
from sqlalchemy import select


async def add_user(username: str, password: str, rank: str = None, session_maker=async_session_maker):
    """Add a new user."""
    async with session_maker() as db:
        existing = await AuthService.get_user_by_username(db, username)
        if existing:
            print(f"❌ User {username} already exists!")
            return None

        user = await AuthService.create_user(db, username=username, password=password)
        if rank:
            user.rank = UserRank(rank)
        await db.commit()

        print("✅ User created successfully!")
        print(f"   Username: {user.username}")
        print(f"   ID: {user.id}")
        print(f"   Rank: {user.rank.value}")
        return user


async def list_users(session_maker=async_session_maker):
    """List all users."""
    async with session_maker() as db:
        result = await db.execute(select(User).order_by(User.created_at.desc()))
        users = result.scalars().all()

        if not users:
            print("No users found.")
            return []

        print(f"\n{'Username':<30} {'Rank':<8} {'Active':<8} {'Permissions'}")
        print("-" * 90)

        for user in users:
            print(
                f"{user.username:<30} "
                f"{user.rank.value:<8} "
                f"{'Yes' if user.is_active else 'No':<8} "
                f"{', '.join(user.permissions or []) or '-'}"
            )

        print(f"\nTotal users: {len(users)}")
        return list(users)


async def set_rank(username: str, rank: str, session_maker=async_session_maker):
    """Change a user's rank."""
    async with session_maker() as db:
        user = await AuthService.get_user_by_username(db, username)
        if not user:
            print(f"❌ User {username} not found!")
            return None

        user.rank = UserRank(rank)
        await db.commit()

        print(f"✅ {username} is now {user.rank.value}!")
        return user


async def grant_permission(username: str, permission: str, session_maker=async_session_maker):
    """Grant a permission to a user."""
    async with session_maker() as db:
        user = await AuthService.get_user_by_username(db, username)
        if not user:
            print(f"❌ User {username} not found!")
            return None

        granted = Permission(permission).value
        permissions = list(user.permissions or [])
        if granted not in permissions:
            # Reassign so the JSON column change is tracked
            user.permissions = permissions + [granted]
            await db.commit()

        print(f"✅ {username} now has {granted}!")
        return user


async def run(args) -> None:
    await init_db()

    if args.command == "add-user":
        await add_user(args.username, args.password, args.rank)
    elif args.command == "list-users":
        await list_users()
    elif args.command == "set-rank":
        await set_rank(args.username, args.rank)
    elif args.command == "grant-permission":
        await grant_permission(args.username, args.permission)


def main():
    parser = argparse.ArgumentParser(description="User management script")
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    ranks = [r.value for r in UserRank]

    add_parser = subparsers.add_parser("add-user", help="Add a new user")
    add_parser.add_argument("--username", required=True, help="Username")
    add_parser.add_argument("--password", required=True, help="User password")
    add_parser.add_argument("--rank", choices=ranks, help="Rank to assign")

    subparsers.add_parser("list-users", help="List all users")

    rank_parser = subparsers.add_parser("set-rank", help="Change a user's rank")
    rank_parser.add_argument("--username", required=True, help="Username")
    rank_parser.add_argument("--rank", required=True, choices=ranks, help="New rank")

    perm_parser = subparsers.add_parser("grant-permission", help="Grant a permission")
    perm_parser.add_argument("--username", required=True, help="Username")
    perm_parser.add_argument(
        "--permission",
        required=True,
        choices=[p.value for p in Permission],
        help="Permission to grant",
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    asyncio.run(run(args))


if __name__ == "__main__":
    main()
