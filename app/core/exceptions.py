"""
File tree errors

Exception               HTTP Status
----------------------  --------------------------
NotFound                404(Not Found)
InvalidParent           400(Bad Request)
InvalidObjectUrl        400(Bad Request)
CyclicMove              409(Conflict)
DuplicateName           409(Conflict)
CorruptTree             500(Internal Server Error)
StorageUnavailable      503(Service Unavailable)

Structural errors are raised before anything is written. StorageUnavailable is
raised after the transaction has been rolled back; callers may retry it.
"""

from fastapi import status


class FileTreeError(Exception):
    """Base class for every typed failure of the file tree"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "File tree operation failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(FileTreeError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "File not found"


class InvalidParent(FileTreeError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Parent folder is invalid"


class CyclicMove(FileTreeError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "A folder cannot be moved into itself or one of its subfolders"


class DuplicateName(FileTreeError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Folder/file name already exists"


class CorruptTree(FileTreeError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Folder hierarchy is corrupt"


class StorageUnavailable(FileTreeError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Storage is temporarily unavailable"


class InvalidObjectUrl(FileTreeError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "File URL does not belong to the owner's object storage area"
