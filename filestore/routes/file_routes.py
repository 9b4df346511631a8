"""File operation API routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse

from filestore.dependencies import get_current_user, get_file_service, get_optional_user
from filestore.schemas.files import FileNodeResponse, UploadRequest
from filestore.services.file_service import FileService

router = APIRouter(prefix="/files", tags=["Files"])


@router.post("", response_model=FileNodeResponse, status_code=status.HTTP_201_CREATED)
def upload(
    request: UploadRequest,
    current_user: str = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service),
):
    """
    Create a folder or upload a file/image.

    Parameters:
        - name: Node name (required)
        - type: folder, file or image (required)
        - parentId: Id of the parent folder (default: root "0")
        - data: Base64 content (required unless type is folder)
        - X-Token header (required)

    Returns:
        - The created node. Images get thumbnails generated in the background.

    Raises:
        - 400: Missing name/type/data, parent not found, parent is not a folder
        - 401: Missing, unknown or expired token
    """
    node = file_service.upload(
        owner_id=current_user,
        name=request.name,
        kind=request.type,
        parent_id=request.parent_id,
        data=request.data,
    )
    return FileNodeResponse.from_node(node)


@router.get("", response_model=List[FileNodeResponse])
def list_files(
    parent_id: Optional[str] = Query(None, alias="parentId"),
    page: Optional[str] = Query(None),
    current_user: str = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service),
):
    """
    List the caller's nodes under a parent, 20 per page, in creation order.

    Raises:
        - 401: Missing, unknown or expired token
    """
    nodes = file_service.list(current_user, parent_id, page)
    return [FileNodeResponse.from_node(node) for node in nodes]


@router.get("/{file_id}", response_model=FileNodeResponse)
def get_file(
    file_id: str,
    current_user: Optional[str] = Depends(get_optional_user),
    file_service: FileService = Depends(get_file_service),
):
    """
    Fetch one node. Public nodes are visible without a token.

    Raises:
        - 404: Node missing or private to another user
    """
    return FileNodeResponse.from_node(file_service.get(current_user, file_id))


@router.put("/{file_id}/publish", response_model=FileNodeResponse)
def publish(
    file_id: str,
    current_user: str = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service),
):
    return FileNodeResponse.from_node(file_service.set_public(current_user, file_id, True))


@router.put("/{file_id}/unpublish", response_model=FileNodeResponse)
def unpublish(
    file_id: str,
    current_user: str = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service),
):
    return FileNodeResponse.from_node(file_service.set_public(current_user, file_id, False))


@router.get("/{file_id}/data")
def get_data(
    file_id: str,
    size: Optional[str] = Query(None),
    current_user: Optional[str] = Depends(get_optional_user),
    file_service: FileService = Depends(get_file_service),
):
    """
    Download a file's content, or a thumbnail of an image.

    Parameters:
        - size: Optional thumbnail width (500, 250 or 100)

    Returns:
        - Raw bytes with a Content-Type guessed from the node name

    Raises:
        - 400: Node is a folder, or size is not a thumbnail width
        - 404: Node missing, private to another user, or content missing
    """
    stream, content_type = file_service.read_content(current_user, file_id, size)
    return StreamingResponse(stream, media_type=content_type)
