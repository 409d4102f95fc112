"""Script to create the initial super admin user."""
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.auth import get_password_hash
from app.config import settings
from app.database import create_tables, dispose_engine, get_session_factory
from app.logging_config import configure_logging
from app.models.user import User, UserRole


def create_admin(username: str = "admin", password: str = "admin123"):
    """Create the first super admin if none exists."""
    create_tables()

    db = get_session_factory()()
    try:
        admin = db.query(User).filter(User.role == UserRole.SUPER_ADMIN).first()
        if admin:
            print(f"Super admin already exists: {admin.username}")
            return

        admin_user = User(
            username=username,
            email=f"{username}@example.com",
            full_name="System Administrator",
            hashed_password=get_password_hash(password),
            role=UserRole.SUPER_ADMIN,
            is_active=True
        )
        db.add(admin_user)
        db.commit()
        print("Super admin created successfully!")
        print(f"Username: {username}")
        print(f"Password: {password}")
        print("\nPlease change the password after first login!")

    finally:
        db.close()
        dispose_engine()


if __name__ == "__main__":
    configure_logging(settings.LOG_LEVEL)
    create_admin(*sys.argv[1:3])
