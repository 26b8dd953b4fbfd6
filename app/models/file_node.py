"""
File node model

Service Operation           Model Schema
--------------------------  ----------------------------------------------
create_node                 FileNodeCreate, FileNodeRead
upload_file                 FileNodeRead
rename                      FileNodeRename
move                        FileNodeMove
toggle_star                 FileNodeStar
trash / restore             FileNodeTrashResponse
purge / empty_trash         FileNodePurgeResponse
list_children / list_nodes  FileNodeRead
resolve_path                FileNodePathRead

A folder is a node with is_folder=True. parent_id references files.id; a null
parent_id places the node at the owner's root.
"""

import uuid
from datetime import UTC, datetime
from enum import Enum

from pydantic import field_validator
from sqlalchemy import BigInteger, Column, DateTime, Index
from sqlmodel import Field, SQLModel  # type: ignore[attr-defined]
from uuid_utils.compat import uuid7

FOLDER_MIME_TYPE = "folder"


class FileVariant(str, Enum):
    """Node variant"""

    FOLDER = "folder"
    FILE = "file"


class FileListOption(str, Enum):
    """Owner-wide listing option"""

    ALL_FILES = "all-files"
    STARRED = "starred"
    TRASH = "trash"


def validate_node_name(value: str) -> str:
    """Strip surrounding whitespace and reject names that cannot be a path segment"""
    name = value.strip()
    if not name:
        raise ValueError("Name must not be empty")
    if "/" in name:
        raise ValueError("Name must not contain '/'")
    if name in (".", ".."):
        raise ValueError("Name must not be '.' or '..'")
    return name


class FileNodeBase(SQLModel):
    """Base file node model"""

    name: str = Field(max_length=255)
    path: str = Field(max_length=4096)
    size: int = Field(default=0, sa_type=BigInteger)  # 0 for folders
    type: str = Field(max_length=255)
    file_url: str | None = Field(default=None, max_length=1024)
    thumbnail_url: str | None = Field(default=None, max_length=1024)
    owner_id: str = Field(max_length=255)  # Subject id issued by the identity provider
    parent_id: uuid.UUID | None = Field(default=None, foreign_key="files.id", ondelete="CASCADE", index=True)
    is_folder: bool = Field(default=False)
    is_starred: bool = Field(default=False)
    is_trash: bool = Field(default=False)


class FileNode(FileNodeBase, table=True):
    """File node database model"""

    __tablename__ = "files"  # type: ignore[assignment]
    __table_args__ = (
        Index("ix_files_owner_id_parent_id", "owner_id", "parent_id"),
        Index("ix_files_owner_id_is_trash", "owner_id", "is_trash"),
    )

    id: uuid.UUID = Field(default_factory=uuid7, primary_key=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class FileNodeCreate(SQLModel):
    """Schema for creating a file node"""

    name: str = Field(min_length=1, max_length=255)
    parent_id: uuid.UUID | None = Field(default=None)
    variant: FileVariant = Field(default=FileVariant.FOLDER)
    size: int = Field(default=0, ge=0)
    type: str | None = Field(default=None, max_length=255)
    file_url: str | None = Field(default=None, max_length=1024)
    thumbnail_url: str | None = Field(default=None, max_length=1024)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return validate_node_name(v)


class FileNodeRename(SQLModel):
    """Schema for renaming a file node"""

    name: str = Field(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return validate_node_name(v)


class FileNodeMove(SQLModel):
    """Schema for moving a file node"""

    new_parent_id: uuid.UUID | None = Field(default=None)


class FileNodeStar(SQLModel):
    """Schema for starring / un-starring a file node"""

    is_starred: bool


class FileNodeRead(FileNodeBase):
    """Schema for reading a file node"""

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class FileNodePathRead(SQLModel):
    """Schema for a resolved path (ancestors ordered from the root)"""

    path: str
    ancestors: list[FileNodeRead]


class FileNodeTrashResponse(SQLModel):
    """Schema for trash / restore responses"""

    file_id: uuid.UUID
    affected: int


class FileNodePurgeResponse(SQLModel):
    """Schema for purge responses"""

    purged_ids: list[uuid.UUID]
    released_urls: list[str]
    unreleased_urls: list[str]
