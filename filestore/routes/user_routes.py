"""User API routes."""

from fastapi import APIRouter, Depends, status

from filestore.dependencies import get_auth_service, get_current_user
from filestore.schemas.users import RegisterRequest, UserResponse
from filestore.services.auth_service import AuthService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Register a new user account.

    Parameters:
        - email: Unique email address
        - password: User password (hashed before storage)

    Returns:
        - id, email of the created user

    Raises:
        - 400: Missing email, missing password, or email already registered
    """
    user = auth_service.register(request.email, request.password)
    return UserResponse.from_user(user)


@router.get("/me", response_model=UserResponse)
def me(
    current_user: str = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Return the user owning the session token.

    Raises:
        - 401: Missing, unknown or expired token
    """
    return UserResponse.from_user(auth_service.get_user(current_user))
