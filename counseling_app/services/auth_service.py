import logging

from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from ..models.user import User
from ..core.exceptions import DuplicateKeyError
from ..core.security import (
    verify_password, get_password_hash, create_user_token, UserRole
)
from ..repositories.user_repository import UserRepository
from ..schemas.auth import UserLogin, UserRegister, TokenResponse, UserResponse

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)

    def register_user(self, user_data: UserRegister, role: UserRole = UserRole.CLIENT) -> User:
        """Register a new user with the given role."""
        # Check if user already exists
        if self.users.get_by_email(user_data.email):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already registered"
            )

        new_user = User(
            username=user_data.username,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            role=role,
            is_active=True
        )

        try:
            # Another request may have taken the email since the check above
            user = self.users.create(new_user)
        except DuplicateKeyError:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already registered"
            )

        logger.info(f"Registered {role.value} user id={user.id}")
        return user

    def register_psychologist(self, user_data: UserRegister) -> User:
        return self.register_user(user_data, role=UserRole.PSYCHOLOGIST)

    def authenticate_user(self, login_data: UserLogin) -> TokenResponse:
        """Authenticate user and return an access token."""
        user = self.users.get_by_email(login_data.email)

        # Same message for unknown email and wrong password
        if not user or not verify_password(login_data.password, user.password_hash):
            logger.warning(f"Failed login attempt for {login_data.email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password"
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Account is deactivated"
            )

        token = create_user_token(user.id, user.email, user.role)

        return TokenResponse(
            access_token=token.access_token,
            token_type=token.token_type,
            expires_in=token.expires_in,
            user=UserResponse.model_validate(user)
        )
