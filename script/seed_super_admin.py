# seed_super_admin.py
import os
import secrets

from app import model  # noqa: F401
from app.database import get_ctx_db
from app.model.enums import UserRole
from app.router.api.logics.user_logic import create_user, get_user_by_username
from app.schema.user_schema import UserCreate

USERNAME = os.environ.get("SUPER_ADMIN_USERNAME", "superadmin")
EMAIL = os.environ.get("SUPER_ADMIN_EMAIL", "superadmin@techteam.app")


def seed_super_admin() -> None:
    with get_ctx_db() as db:
        if get_user_by_username(db, USERNAME):
            print(f"✓ Super admin already exists: {USERNAME}")
            return

        password = os.environ.get("SUPER_ADMIN_PASSWORD") or secrets.token_urlsafe(12)
        request = UserCreate(
            username=USERNAME,
            email=EMAIL,
            password=password,
            first_name="Super",
            last_name="Admin",
        )
        create_user(db, request, role=UserRole.super_admin, school_id=None)

    print("✅ Super admin created.")
    print(f"Username: {USERNAME}")
    if "SUPER_ADMIN_PASSWORD" not in os.environ:
        print(f"Password: {password}")
    print("⚠️  Change this password after the first login.")


if __name__ == "__main__":
    seed_super_admin()
