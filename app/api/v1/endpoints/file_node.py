"""
File node endpoints

Endpoint                    Service Operation
--------------------------  ------------------
POST /                      create_node()
POST /upload                upload_file()
GET /                       list_children()
GET /option/{option}        list_nodes()
GET /{file_id}              get_node()
GET /{file_id}/path         resolve_path()
PUT /{file_id}/rename       rename()
PUT /{file_id}/move         move()
PUT /{file_id}/star         toggle_star()
PUT /{file_id}/trash        trash()
PUT /{file_id}/restore      restore()
DELETE /trash               empty_trash()
DELETE /{file_id}           purge()

Error                 Status Code
--------------------  --------------------------
NotFound              404(Not Found)
InvalidParent         400(Bad Request)
InvalidObjectUrl      400(Bad Request)
CyclicMove            409(Conflict)
DuplicateName         409(Conflict)
CorruptTree           500(Internal Server Error)
StorageUnavailable    503(Service Unavailable)

The owner of every operation is the subject id forwarded by the identity provider.
"""

import uuid
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from app.core.exceptions import FileTreeError
from app.core.logger import get_logger
from app.core.security import get_current_owner
from app.models.file_node import (
    FileListOption,
    FileNode,
    FileNodeCreate,
    FileNodeMove,
    FileNodePathRead,
    FileNodePurgeResponse,
    FileNodeRead,
    FileNodeRename,
    FileNodeStar,
    FileNodeTrashResponse,
)
from app.services.file_tree import FileTreeService, get_file_tree_service

logger = get_logger(__name__)

router: APIRouter = APIRouter()

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"description": "Invalid parent folder or file URL"},
    404: {"description": "File not found"},
    409: {"description": "Folder/file name already exists / Cyclic move"},
    500: {"description": "Internal server error"},
    503: {"description": "Storage unavailable"},
}


def to_http_exception(operation: str, e: FileTreeError) -> HTTPException:
    logger.info(f"file-tree: {operation}() - status={e.status_code}, message={e.message}")
    return HTTPException(status_code=e.status_code, detail=e.message)


def to_internal_error(operation: str, e: Exception) -> HTTPException:
    logger.error(f"Failed to {operation}: {str(e)}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {operation.replace('_', ' ')}.",
    )


#
# Create
#


@router.post("/", response_model=FileNodeRead, status_code=status.HTTP_201_CREATED, responses=ERROR_RESPONSES)
async def create_file_node(
    file_node_data: FileNodeCreate,
    owner_id: str = Depends(get_current_owner),
    service: FileTreeService = Depends(get_file_tree_service),
) -> FileNode:
    """
    Create new file node (folder, or file whose content is already in object storage)
    """
    try:
        return await service.create_node(
            owner_id,
            file_node_data.name,
            file_node_data.parent_id,
            file_node_data.variant,
            size=file_node_data.size,
            content_type=file_node_data.type,
            file_url=file_node_data.file_url,
            thumbnail_url=file_node_data.thumbnail_url,
        )
    except FileTreeError as e:
        raise to_http_exception("create_node", e)
    except Exception as e:
        raise to_internal_error("create_node", e)


@router.post("/upload", response_model=FileNodeRead, status_code=status.HTTP_201_CREATED, responses=ERROR_RESPONSES)
async def upload_file(
    file: UploadFile = File(...),
    parent_id: uuid.UUID | None = Form(default=None),
    owner_id: str = Depends(get_current_owner),
    service: FileTreeService = Depends(get_file_tree_service),
) -> FileNode:
    """
    Upload a file into a folder (or the root)
    """
    try:
        content = await file.read()
        return await service.upload_file(
            owner_id,
            file.filename or "",
            content,
            parent_id=parent_id,
            content_type=file.content_type,
        )
    except FileTreeError as e:
        raise to_http_exception("upload_file", e)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except Exception as e:
        raise to_internal_error("upload_file", e)


#
# Read
#


@router.get("/", response_model=list[FileNodeRead], responses=ERROR_RESPONSES)
async def list_file_nodes(
    parent_id: uuid.UUID | None = Query(default=None, description="Parent folder ID (omit for the root)"),
    include_trash: bool = Query(default=False, description="Include trashed children"),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    owner_id: str = Depends(get_current_owner),
    service: FileTreeService = Depends(get_file_tree_service),
) -> list[FileNode]:
    """
    Retrieve the children of a folder
    """
    try:
        return await service.list_children(
            owner_id, parent_id, include_trash=include_trash, skip=skip, limit=limit
        )
    except FileTreeError as e:
        raise to_http_exception("list_children", e)
    except Exception as e:
        raise to_internal_error("list_children", e)


@router.get("/option/{option}", response_model=list[FileNodeRead], responses=ERROR_RESPONSES)
async def list_file_nodes_by_option(
    option: FileListOption,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    owner_id: str = Depends(get_current_owner),
    service: FileTreeService = Depends(get_file_tree_service),
) -> list[FileNode]:
    """
    Retrieve file nodes across the owner's whole tree

    Options:
    - all-files: every live file
    - starred: starred files and folders
    - trash: top-level items in the trash
    """
    try:
        return await service.list_nodes(owner_id, option, skip=skip, limit=limit)
    except FileTreeError as e:
        raise to_http_exception("list_nodes", e)
    except Exception as e:
        raise to_internal_error("list_nodes", e)


@router.get("/{file_id}", response_model=FileNodeRead, responses=ERROR_RESPONSES)
async def get_file_node(
    file_id: uuid.UUID,
    owner_id: str = Depends(get_current_owner),
    service: FileTreeService = Depends(get_file_tree_service),
) -> FileNode:
    try:
        return await service.get_node(owner_id, file_id)
    except FileTreeError as e:
        raise to_http_exception("get_node", e)
    except Exception as e:
        raise to_internal_error("get_node", e)


@router.get("/{file_id}/path", response_model=FileNodePathRead, responses=ERROR_RESPONSES)
async def get_file_node_path(
    file_id: uuid.UUID,
    owner_id: str = Depends(get_current_owner),
    service: FileTreeService = Depends(get_file_tree_service),
) -> dict[str, Any]:
    """
    Resolve the breadcrumb trail of a file node
    """
    try:
        resolved = await service.resolve_path(owner_id, file_id)
        return {"path": resolved.path, "ancestors": resolved.ancestors}
    except FileTreeError as e:
        raise to_http_exception("resolve_path", e)
    except Exception as e:
        raise to_internal_error("resolve_path", e)


#
# Update
#


@router.put("/{file_id}/rename", response_model=FileNodeRead, responses=ERROR_RESPONSES)
async def rename_file_node(
    file_id: uuid.UUID,
    rename_data: FileNodeRename,
    owner_id: str = Depends(get_current_owner),
    service: FileTreeService = Depends(get_file_tree_service),
) -> FileNode:
    try:
        return await service.rename(owner_id, file_id, rename_data.name)
    except FileTreeError as e:
        raise to_http_exception("rename", e)
    except Exception as e:
        raise to_internal_error("rename", e)


@router.put("/{file_id}/move", response_model=FileNodeRead, responses=ERROR_RESPONSES)
async def move_file_node(
    file_id: uuid.UUID,
    move_data: FileNodeMove,
    owner_id: str = Depends(get_current_owner),
    service: FileTreeService = Depends(get_file_tree_service),
) -> FileNode:
    """
    Move file node to a new parent folder (null = root)
    """
    try:
        return await service.move(owner_id, file_id, move_data.new_parent_id)
    except FileTreeError as e:
        raise to_http_exception("move", e)
    except Exception as e:
        raise to_internal_error("move", e)


@router.put("/{file_id}/star", response_model=FileNodeRead, responses=ERROR_RESPONSES)
async def star_file_node(
    file_id: uuid.UUID,
    star_data: FileNodeStar,
    owner_id: str = Depends(get_current_owner),
    service: FileTreeService = Depends(get_file_tree_service),
) -> FileNode:
    try:
        return await service.toggle_star(owner_id, file_id, star_data.is_starred)
    except FileTreeError as e:
        raise to_http_exception("toggle_star", e)
    except Exception as e:
        raise to_internal_error("toggle_star", e)


@router.put("/{file_id}/trash", response_model=FileNodeTrashResponse, responses=ERROR_RESPONSES)
async def trash_file_node(
    file_id: uuid.UUID,
    owner_id: str = Depends(get_current_owner),
    service: FileTreeService = Depends(get_file_tree_service),
) -> dict[str, Any]:
    """
    Move file node and everything below it to the trash
    """
    try:
        affected = await service.trash(owner_id, file_id)
        return {"file_id": file_id, "affected": affected}
    except FileTreeError as e:
        raise to_http_exception("trash", e)
    except Exception as e:
        raise to_internal_error("trash", e)


@router.put("/{file_id}/restore", response_model=FileNodeTrashResponse, responses=ERROR_RESPONSES)
async def restore_file_node(
    file_id: uuid.UUID,
    owner_id: str = Depends(get_current_owner),
    service: FileTreeService = Depends(get_file_tree_service),
) -> dict[str, Any]:
    """
    Restore file node and everything below it from the trash
    """
    try:
        affected = await service.restore(owner_id, file_id)
        return {"file_id": file_id, "affected": affected}
    except FileTreeError as e:
        raise to_http_exception("restore", e)
    except Exception as e:
        raise to_internal_error("restore", e)


#
# Delete
#


@router.delete("/trash", response_model=FileNodePurgeResponse, responses=ERROR_RESPONSES)
async def empty_trash(
    owner_id: str = Depends(get_current_owner),
    service: FileTreeService = Depends(get_file_tree_service),
) -> dict[str, Any]:
    """
    Permanently delete everything in the trash
    """
    try:
        return asdict(await service.empty_trash(owner_id))
    except FileTreeError as e:
        raise to_http_exception("empty_trash", e)
    except Exception as e:
        raise to_internal_error("empty_trash", e)


@router.delete("/{file_id}", response_model=FileNodePurgeResponse, responses=ERROR_RESPONSES)
async def purge_file_node(
    file_id: uuid.UUID,
    owner_id: str = Depends(get_current_owner),
    service: FileTreeService = Depends(get_file_tree_service),
) -> dict[str, Any]:
    """
    Permanently delete file node, everything below it, and the stored content
    """
    try:
        return asdict(await service.purge(owner_id, file_id))
    except FileTreeError as e:
        raise to_http_exception("purge", e)
    except Exception as e:
        raise to_internal_error("purge", e)
