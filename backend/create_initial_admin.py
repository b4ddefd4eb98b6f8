# backend/create_initial_admin.py

from getpass import getpass

from tmsdb.database import SessionLocal
from tmsdb.apps.accounts import services as account_services
from tmsdb.apps.accounts.models import RoleName
from tmsdb.apps.accounts.schemas import MIN_PASSWORD_LENGTH


def _prompt(label: str, default: str = "") -> str:
    suffix = f" [{default}]" if default else ""
    value = input(f"{label}{suffix}: ").strip()
    return value or default


def main() -> None:
    email = _prompt("Admin email", "admin@learning.com")
    first_name = _prompt("First name", "System")
    last_name = _prompt("Last name", "Administrator")

    password = getpass("Password: ")
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"[ERROR] Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        return
    if password != getpass("Confirm password: "):
        print("[ERROR] Passwords do not match.")
        return

    db = SessionLocal()
    try:
        existing = account_services.get_user_by_email(db, email)
        if existing:
            print(f"[INFO] User already exists: id={existing.id}, email={existing.email}")
            return

        user = account_services.create_user(
            db,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            roles=(RoleName.ADMIN, RoleName.MANAGER),
        )

        print("[OK] Created admin user:")
        print(f"  id:      {user.id}")
        print(f"  email:   {user.email}")
        print(f"  roles:   {', '.join(user.role_names)}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
