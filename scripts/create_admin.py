#!/usr/bin/env python3
"""
Bootstrap script to provision the first super admin.

This script:
1. Connects with the application settings (MONGODB_URI, MONGODB_DATABASE)
2. Ensures the admin_users indexes exist
3. Creates a super_admin if no admin identity exists yet,
   otherwise lists the existing admins and exits

Usage:
    python scripts/create_admin.py --username admin --email admin@example.com
    python scripts/create_admin.py --username admin --email admin@example.com --password '...'

The password is prompted for when --password is omitted.
"""

import argparse
import asyncio
import getpass
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.auth import PasswordHasher
from common.database import connect_with_fallback
from common.utils import ValidationException, configure_logging
from powershield.config import get_settings
from powershield.database import ensure_indexes
from powershield.models import AdminRole
from powershield.services.admin import CredentialStore, validate_admin_data


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Provision the initial PowerShield super admin.")
    parser.add_argument("--username", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", help="Prompted for when omitted")
    return parser.parse_args(argv)


async def create_initial_admin(args: argparse.Namespace) -> int:
    """Create the first super admin; returns the process exit code."""
    settings = get_settings()

    if not settings.MONGODB_URI:
        print("ERROR: MONGODB_URI environment variable not set")
        return 1

    password = args.password or getpass.getpass("Password: ")
    data = {
        "username": args.username,
        "email": args.email,
        "password": password,
        "role": AdminRole.SUPER_ADMIN.value,
    }

    try:
        validate_admin_data(data)
    except ValidationException as e:
        for field, message in e.errors.items():
            print(f"ERROR: {field}: {message}")
        return 1

    print(f"Connecting to database: {settings.MONGODB_DATABASE}")
    mongo = await connect_with_fallback(
        settings.get_mongodb_uris(),
        settings.MONGODB_DATABASE,
        attempts=settings.MONGODB_CONNECT_ATTEMPTS,
        backoff_seconds=settings.MONGODB_CONNECT_BACKOFF_SECONDS,
        timeout_ms=settings.MONGODB_TIMEOUT_MS,
    )

    try:
        await ensure_indexes(mongo.db)
        store = CredentialStore(mongo.db, PasswordHasher(rounds=settings.BCRYPT_ROUNDS))

        if await store.count_identities() > 0:
            print("Admin users already exist. Skipping creation.")
            for admin in await store.list_identities():
                print(f"   {admin['username']} <{admin['email']}> role={admin['role']}")
            return 0

        admin = await store.create_identity(data)
    finally:
        await mongo.disconnect()

    print("Initial admin user created successfully!")
    print(f"   Id: {admin['id']}")
    print(f"   Username: {admin['username']}")
    print(f"   Email: {admin['email']}")
    print(f"   Role: {admin['role']}")
    print("")
    print("Login endpoint: POST /api/admin/login")
    return 0


if __name__ == "__main__":
    configure_logging("WARNING")
    print("Initial Admin Bootstrap")
    print("-" * 40)
    sys.exit(asyncio.run(create_initial_admin(parse_args())))
