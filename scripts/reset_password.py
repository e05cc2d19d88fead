#!/usr/bin/env python3
"""
OrganiJob - Password Reset CLI

Reset a user's password from the command line.
There is no self-service reset, so this is the way to recover an account.

Usage:
    python scripts/reset_password.py user@email.com newpassword123
"""
import sys
import os

# Add project root to path so we can import app modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.storage import build_storage
from app.auth.service import auth_service, AuthServiceError


def reset_password(email: str, new_password: str):
    storage = build_storage()
    storage.init()

    try:
        user = auth_service.reset_password(email, new_password, storage)
    except AuthServiceError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    print(f"Password reset successfully for {user.email}")
    print("All active sessions have been revoked. The user must log in again.")


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python scripts/reset_password.py <email> <new_password>")
        print("Example: python scripts/reset_password.py user@example.com MyNewPass123")
        sys.exit(1)

    reset_password(sys.argv[1], sys.argv[2])
