"""FastAPI dependencies resolving services and the caller's identity."""

from typing import Optional

from fastapi import Depends, Header, Request

from filestore.auth import extract_token
from filestore.container import ServiceContainer
from filestore.services.auth_service import AuthService
from filestore.services.file_service import FileService
from filestore.services.status_service import StatusService


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_auth_service(container: ServiceContainer = Depends(get_container)) -> AuthService:
    return container.auth_service


def get_file_service(container: ServiceContainer = Depends(get_container)) -> FileService:
    return container.file_service


def get_status_service(container: ServiceContainer = Depends(get_container)) -> StatusService:
    return container.status_service


def get_token(
    x_token: Optional[str] = Header(None),
    authorization: Optional[str] = Header(None),
) -> Optional[str]:
    return extract_token(x_token, authorization)


def get_current_user(
    request: Request,
    token: Optional[str] = Depends(get_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> str:
    """
    Resolve the session token to a user id.

    Raises:
        UnauthorizedError: 401 if the token is missing, unknown or expired
    """
    user_id = auth_service.resolve_identity(token)
    request.state.user_id = user_id
    return user_id


def get_optional_user(
    request: Request,
    token: Optional[str] = Depends(get_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[str]:
    user_id = auth_service.resolve_optional_identity(token)
    request.state.user_id = user_id
    return user_id
