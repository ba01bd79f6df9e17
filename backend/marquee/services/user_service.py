import logging
from typing import Optional
from sqlalchemy.orm import Session
from marquee.schemas.user import UserCreate
from marquee.core.auth import get_password_hash, verify_password
from marquee.core.exceptions import UserAlreadyExistsException, InvalidCredentialsException
from marquee.repositories.user_repository import UserRepository
from marquee.models.user import User

logger = logging.getLogger(__name__)

class UserService:
    """Registration and credential checks"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repository = UserRepository(db)

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return self.user_repository.get(user_id)

    def create_user(self, user_data: UserCreate) -> User:
        """Create a new user"""
        logger.info(f"Creating user with email: {user_data.email}")

        if self.user_repository.email_exists(user_data.email):
            raise UserAlreadyExistsException("Email already registered")
        if self.user_repository.username_exists(user_data.username):
            raise UserAlreadyExistsException("Username already taken")

        return self.user_repository.create_user(
            email=user_data.email,
            username=user_data.username,
            hashed_password=get_password_hash(user_data.password),
        )

    def authenticate_user(self, email: str, password: str) -> User:
        """Return the active user matching the credentials"""
        user = self.user_repository.get_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            raise InvalidCredentialsException("Incorrect email or password")
        if not user.is_active:
            raise InvalidCredentialsException("Inactive user")
        return user
