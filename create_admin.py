"""
Script to create an admin account (or promote an existing user to admin).

Admins cannot self-register through the API, so the first one is created
here. Run this script from the project root:
    python create_admin.py --email admin@example.com --name "Site Admin"

The password is prompted for unless --password is given.
"""

import argparse
import getpass
import os
import sys

# Add app to Python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from app.core.database import SessionLocal
from app.core.security import get_password_hash
from app.crud import user as user_crud
from app.models.user import UserRole


def create_admin(email: str, name: str, password: str) -> None:
    """Create an active admin, or promote and reactivate the existing user with that email."""
    db = SessionLocal()

    try:
        user = user_crud.get_by_email(db, email)

        if user:
            print(f"User {user.email} (ID: {user.id}) already exists with role {user.role.value}")
            confirm = input("Promote this user to admin? (yes/no): ")
            if confirm.lower() != 'yes':
                print("Canceled.")
                return
            user.role = UserRole.ADMIN
            user.is_active = True
        else:
            user = user_crud.create(
                db,
                name=name,
                email=email,
                hashed_password=get_password_hash(password),
                role=UserRole.ADMIN,
            )

        db.commit()
        print(f"\n✓ Admin ready: {user.email} (ID: {user.id})\n")

    except Exception as e:
        db.rollback()
        print(f"\n✗ Error creating admin: {e}")
        print("Database changes have been rolled back.")
        raise
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create or promote a Job Board admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default="Admin")
    parser.add_argument("--password", help="Prompted for when omitted")
    args = parser.parse_args()

    password = args.password
    if not password:
        password = getpass.getpass("Password (min 6 characters): ")
    if len(password) < 6:
        print("Password must be at least 6 characters")
        sys.exit(1)

    create_admin(args.email, args.name[:50], password)


if __name__ == "__main__":
    main()
