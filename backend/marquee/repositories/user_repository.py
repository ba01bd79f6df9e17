from typing import Optional
from sqlalchemy.orm import Session
from marquee.repositories.base_repository import BaseRepository
from marquee.models.user import User

class UserRepository(BaseRepository[User]):
    """User repository with user-specific operations"""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        return self.filter_one_by(email=email)

    def email_exists(self, email: str) -> bool:
        """Check if email exists"""
        return self.exists(email=email)

    def username_exists(self, username: str) -> bool:
        """Check if username exists"""
        return self.exists(username=username)

    def create_user(self, email: str, username: str, hashed_password: str) -> User:
        """Create new user"""
        return self.create({
            "email": email,
            "username": username,
            "hashed_password": hashed_password,
            "is_active": True,
        })
