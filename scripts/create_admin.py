"""Script to create initial admin user."""
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.auth import get_password_hash
from app.database import SessionLocal, engine, Base
from app.models import User, UserRole


def create_admin(db, username="admin", email="admin@example.com", password="admin123"):
    """Create initial admin user if none exists. Returns the admin user."""
    admin = db.query(User).filter(User.role == UserRole.ADMIN).first()
    if admin:
        print(f"Admin user already exists: {admin.username}")
        return admin

    admin = User(
        username=username,
        email=email,
        hashed_password=get_password_hash(password),
        role=UserRole.ADMIN,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    print("Admin user created successfully!")
    print(f"Email: {email}")
    print(f"Password: {password}")
    print("\nPlease change the password after first login!")
    return admin


def main():
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        create_admin(
            db,
            username=os.environ.get("ADMIN_USERNAME", "admin"),
            email=os.environ.get("ADMIN_EMAIL", "admin@example.com"),
            password=os.environ.get("ADMIN_PASSWORD", "admin123"),
        )
    finally:
        db.close()


if __name__ == "__main__":
    main()
