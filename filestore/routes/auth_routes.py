"""Session API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Response, status

from common.logging_config import get_logger
from filestore.dependencies import get_auth_service, get_token
from filestore.exceptions import UnauthorizedError
from filestore.schemas.auth import ConnectResponse
from filestore.services.auth_service import AuthService

logger = get_logger(__name__)

router = APIRouter(tags=["Authentication"])


@router.get("/connect", response_model=ConnectResponse)
def connect(
    authorization: Optional[str] = Header(None),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Open a session.

    Parameters:
        - Authorization header: Basic <base64(email:password)>

    Returns:
        - token: Session token, valid for 24 hours

    Raises:
        - 401: Missing or invalid credentials
    """
    token = auth_service.authenticate(authorization)
    return ConnectResponse(token=token)


@router.get("/disconnect", status_code=status.HTTP_204_NO_CONTENT)
def disconnect(
    token: Optional[str] = Depends(get_token),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Close the session identified by the X-Token header.

    A token that no longer resolves (already closed or expired) is answered
    with 204 as well, so retried logouts succeed.

    Raises:
        - 401: No token supplied
    """
    if not token:
        raise UnauthorizedError()

    try:
        auth_service.revoke(token)
    except UnauthorizedError:
        logger.info("Disconnect for a session that is already gone")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
