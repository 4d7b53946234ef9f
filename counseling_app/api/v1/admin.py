from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...api.deps import get_admin_user
from ...services.auth_service import AuthService
from ...schemas.auth import UserRegister, UserResponse
from ...models.user import User

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/psychologists",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED
)
def register_psychologist(
    user_data: UserRegister,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    """Register a psychologist account (admin only)."""
    auth_service = AuthService(db)
    user = auth_service.register_psychologist(user_data)
    return UserResponse.model_validate(user)
