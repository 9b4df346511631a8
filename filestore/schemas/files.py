"""Pydantic schemas for file operation endpoints."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from filestore.repositories.file_repository import FileNode


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UploadRequest(CamelModel):
    """
    Request model for POST /files.

    data is the base64-encoded content and is ignored for folders.
    """
    name: Optional[str] = None
    type: Optional[str] = None
    parent_id: Optional[Union[str, int]] = None
    data: Optional[str] = None


class FileNodeResponse(CamelModel):
    """Public view of a file or folder node."""
    id: str
    user_id: str
    name: str
    type: str
    is_public: bool
    parent_id: str

    @classmethod
    def from_node(cls, node: FileNode) -> "FileNodeResponse":
        return cls(
            id=node.file_id,
            user_id=node.owner_id,
            name=node.name,
            type=node.kind,
            is_public=node.is_public,
            parent_id=node.parent_id,
        )
