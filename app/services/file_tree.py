"""
File tree service

Per-owner hierarchical namespace of files and folders stored in the `files`
table. Every operation is scoped by owner_id and runs in a single database
transaction bounded by STORAGE_TIMEOUT_SECONDS.

Operation           Errors
------------------  ---------------------------------------------------
create_node         InvalidParent, InvalidObjectUrl, DuplicateName
upload_file         InvalidParent, DuplicateName, StorageUnavailable
rename              NotFound, DuplicateName
move                NotFound, InvalidParent, CyclicMove, DuplicateName
toggle_star         NotFound
trash               NotFound
restore             NotFound, DuplicateName
purge               NotFound
empty_trash         -
iter_children       NotFound (unknown parent)
list_nodes          -
get_node            NotFound
resolve_path        NotFound, CorruptTree

Trash policy: trash and restore cascade to every descendant when written.
A node restored while its parent is still in the trash is moved to the root.

create_node and move reject (InvalidParent) any result nested deeper than
max_depth, so CorruptTree on read always means damaged data.

Any operation may also raise StorageUnavailable on timeout or connection
failure; the transaction is rolled back first.
"""

import asyncio
import uuid
from collections import defaultdict
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import aclosing, asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime

from fastapi import Depends
from sqlalchemy import and_, delete, or_, select
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased
from sqlalchemy.sql import Select
from uuid_utils.compat import uuid7

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import (
    CorruptTree,
    CyclicMove,
    DuplicateName,
    FileTreeError,
    InvalidObjectUrl,
    InvalidParent,
    NotFound,
    StorageUnavailable,
)
from app.core.logger import get_logger
from app.models.file_node import FOLDER_MIME_TYPE, FileListOption, FileNode, FileVariant, validate_node_name
from app.services.object_storage import ObjectStorageClient, get_object_storage
from app.utils.utils_http import is_image_type

logger = get_logger(__name__)

DEFAULT_FILE_TYPE = "application/octet-stream"


@dataclass
class PurgeResult:
    """Outcome of a permanent deletion"""

    purged_ids: list[uuid.UUID] = field(default_factory=list)
    released_urls: list[str] = field(default_factory=list)
    unreleased_urls: list[str] = field(default_factory=list)


@dataclass
class ResolvedPath:
    """Ancestor chain of a node, ordered from the root down to the node itself"""

    ancestors: list[FileNode]

    @property
    def path(self) -> str:
        return "/" + "/".join(node.name for node in self.ancestors)


def _now() -> datetime:
    return datetime.now(UTC)


def _join_path(parent: FileNode | None, name: str) -> str:
    return f"{parent.path}/{name}" if parent is not None else f"/{name}"


def _is_unavailable(e: BaseException) -> bool:
    if isinstance(e, (OperationalError, InterfaceError)):
        return True
    if isinstance(e, DBAPIError):
        return e.connection_invalidated
    return isinstance(e, OSError)


class FileTreeService:
    """
    Invariant-enforcing operations over the file tree of every owner
    """

    __class_name__ = "FileTreeService"

    def __init__(
        self,
        db: AsyncSession,
        storage: ObjectStorageClient | None = None,
        *,
        enforce_unique_names: bool | None = None,
        max_depth: int | None = None,
        page_size: int | None = None,
        timeout: float | None = None,
    ):
        """
        Args:
            db: Session the service owns the transactions of
            storage: Object storage client used by upload_file and purge
            enforce_unique_names: Sibling name policy (defaults to settings)
            max_depth: Deepest nesting a write may produce; a longer ancestor walk is reported as corrupt
            page_size: Rows fetched per page by iter_children
            timeout: Upper bound for one operation, in seconds
        """
        self.db = db
        self.storage = storage
        self.enforce_unique_names = (
            settings.ENFORCE_UNIQUE_SIBLING_NAMES if enforce_unique_names is None else enforce_unique_names
        )
        self.max_depth = max_depth or settings.MAX_TREE_DEPTH
        self.page_size = page_size or settings.LIST_PAGE_SIZE
        self.timeout = timeout or settings.STORAGE_TIMEOUT_SECONDS

    #
    # Transaction handling
    #

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncGenerator[None]:
        """
        Run the enclosed block as one unit: commit on success, roll back on any failure.
        Reads commit too, so the session never holds a transaction between operations.
        Timeouts and connection failures are reported as StorageUnavailable.
        """
        try:
            async with asyncio.timeout(self.timeout):
                yield
                await self.db.commit()
        except FileTreeError:
            await self._rollback(operation)
            raise
        except TimeoutError:
            await self._rollback(operation)
            logger.error(f"{operation}: timed out after {self.timeout}s")
            raise StorageUnavailable(f"{operation} timed out")
        except Exception as e:
            await self._rollback(operation)
            if _is_unavailable(e):
                logger.error(f"{operation}: storage unavailable: {str(e)}")
                raise StorageUnavailable() from e
            raise

    async def _rollback(self, operation: str) -> None:
        try:
            await self.db.rollback()
        except DBAPIError as e:
            logger.error(f"{operation}: rollback failed: {str(e)}")

    #
    # Lookups (every query carries the owner predicate)
    #

    def _owned(self, owner_id: str) -> Select:
        return select(FileNode).where(FileNode.owner_id == owner_id)  # type: ignore[arg-type]

    async def _get_owned(self, owner_id: str, node_id: uuid.UUID, *, lock: bool = False) -> FileNode:
        stmt = self._owned(owner_id).where(FileNode.id == node_id)  # type: ignore[arg-type]
        if lock:
            stmt = stmt.with_for_update()
        node = (await self.db.execute(stmt)).scalar_one_or_none()
        if node is None:
            raise NotFound(f"File not found: {node_id}")
        return node

    async def _get_parent(self, owner_id: str, parent_id: uuid.UUID | None) -> FileNode | None:
        """Load a prospective parent and check it can hold children"""
        if parent_id is None:
            return None

        stmt = self._owned(owner_id).where(FileNode.id == parent_id).with_for_update()  # type: ignore[arg-type]
        parent = (await self.db.execute(stmt)).scalar_one_or_none()
        if parent is None:
            raise InvalidParent(f"Parent folder not found: {parent_id}")
        if not parent.is_folder:
            raise InvalidParent(f"Parent is not a folder: {parent.name}")
        if parent.is_trash:
            raise InvalidParent(f"Parent folder is in trash: {parent.name}")
        return parent

    async def _ensure_unique_name(
        self,
        owner_id: str,
        parent_id: uuid.UUID | None,
        name: str,
        *,
        exclude_id: uuid.UUID | None = None,
    ) -> None:
        if not self.enforce_unique_names:
            return

        stmt = (
            select(FileNode.id)
            .where(FileNode.owner_id == owner_id)  # type: ignore[arg-type]
            .where(FileNode.name == name)  # type: ignore[arg-type]
            .where(FileNode.is_trash.is_(False))  # type: ignore[attr-defined]
        )
        if parent_id is None:
            stmt = stmt.where(FileNode.parent_id.is_(None))  # type: ignore[union-attr]
        else:
            stmt = stmt.where(FileNode.parent_id == parent_id)  # type: ignore[arg-type]
        if exclude_id is not None:
            stmt = stmt.where(FileNode.id != exclude_id)  # type: ignore[arg-type]

        if (await self.db.execute(stmt.limit(1))).first() is not None:
            raise DuplicateName(f"Folder/file name already exists: {name}")

    async def _load_descendants(self, owner_id: str, node_id: uuid.UUID, *, lock: bool = False) -> list[FileNode]:
        """Every node below node_id, found through a recursive CTE over parent_id"""
        subtree = (
            select(FileNode.id)
            .where(FileNode.id == node_id)  # type: ignore[arg-type]
            .where(FileNode.owner_id == owner_id)  # type: ignore[arg-type]
            .cte("subtree", recursive=True)
        )
        child = aliased(FileNode)
        # UNION (not UNION ALL) terminates even if the stored tree contains a cycle
        subtree = subtree.union(
            select(child.id).where(child.parent_id == subtree.c.id).where(child.owner_id == owner_id)
        )

        stmt = (
            self._owned(owner_id)
            .where(FileNode.id.in_(select(subtree.c.id)))  # type: ignore[attr-defined]
            .where(FileNode.id != node_id)  # type: ignore[arg-type]
        )
        if lock:
            stmt = stmt.with_for_update()
        return list((await self.db.execute(stmt)).scalars().all())

    async def _walk_ancestors(self, owner_id: str, node: FileNode) -> list[FileNode]:
        """
        Follow parent_id from node up to the root

        Returns:
            [node, parent, grandparent, ..., root item]

        Raises:
            CorruptTree: On a cycle, a dangling parent or a walk longer than max_depth
        """
        chain = [node]
        seen = {node.id}
        current = node
        while current.parent_id is not None:
            if current.parent_id in seen:
                raise CorruptTree(f"Cycle detected at {current.parent_id}")
            if len(chain) >= self.max_depth:
                raise CorruptTree(f"Folder depth exceeds {self.max_depth}")

            stmt = self._owned(owner_id).where(FileNode.id == current.parent_id)  # type: ignore[arg-type]
            parent = (await self.db.execute(stmt)).scalar_one_or_none()
            if parent is None:
                raise CorruptTree(f"Parent {current.parent_id} of {current.id} is missing")

            chain.append(parent)
            seen.add(parent.id)
            current = parent
        return chain

    def _rewrite_paths(self, root: FileNode, descendants: list[FileNode]) -> None:
        """Recompute the materialized path of every descendant from root.path"""
        children: dict[uuid.UUID | None, list[FileNode]] = defaultdict(list)
        for node in descendants:
            children[node.parent_id].append(node)

        stack = [root]
        while stack:
            current = stack.pop()
            for child in children.get(current.id, []):
                child.path = _join_path(current, child.name)
                stack.append(child)

    def _ensure_unique_within(self, nodes: list[FileNode]) -> None:
        """Sibling name check for a set of nodes that are about to become live together"""
        if not self.enforce_unique_names:
            return

        seen: set[tuple[uuid.UUID | None, str]] = set()
        for node in nodes:
            if node.is_trash:
                continue
            key = (node.parent_id, node.name)
            if key in seen:
                raise DuplicateName(f"Folder/file name already exists: {node.path}")
            seen.add(key)

    def _subtree_height(self, root: FileNode, descendants: list[FileNode]) -> int:
        """Levels in the subtree rooted at root (1 for a node without children)"""
        children: dict[uuid.UUID | None, list[FileNode]] = defaultdict(list)
        for node in descendants:
            children[node.parent_id].append(node)

        height = 0
        stack = [(root, 1)]
        while stack:
            current, level = stack.pop()
            height = max(height, level)
            stack.extend((child, level + 1) for child in children.get(current.id, []))
        return height

    def _ensure_depth(self, parent_depth: int, height: int, parent: FileNode | None) -> None:
        """Reject a write that would nest anything deeper than max_depth"""
        if parent_depth + height > self.max_depth:
            where = parent.path if parent is not None else "/"
            raise InvalidParent(f"Folder depth would exceed {self.max_depth} under {where}")

    def _ensure_owned_urls(self, owner_id: str, *urls: str | None) -> None:
        for url in urls:
            if url is None:
                continue
            if self.storage is None or not self.storage.is_owned_url(owner_id, url):
                raise InvalidObjectUrl(f"File URL is not in the owner's storage area: {url}")

    #
    # Mutations
    #

    async def create_node(
        self,
        owner_id: str,
        name: str,
        parent_id: uuid.UUID | None = None,
        variant: FileVariant = FileVariant.FOLDER,
        *,
        size: int = 0,
        content_type: str | None = None,
        file_url: str | None = None,
        thumbnail_url: str | None = None,
        node_id: uuid.UUID | None = None,
    ) -> FileNode:
        """
        Create a file or folder under parent_id (None = owner's root).
        A file's URLs must point into the owner's own area of object storage.
        """
        name = validate_node_name(name)
        is_folder = variant == FileVariant.FOLDER
        if not is_folder:
            self._ensure_owned_urls(owner_id, file_url, thumbnail_url)

        async with self._transaction("create_node"):
            parent = await self._get_parent(owner_id, parent_id)
            if parent is not None:
                self._ensure_depth(len(await self._walk_ancestors(owner_id, parent)), 1, parent)
            await self._ensure_unique_name(owner_id, parent_id, name)

            node = FileNode(
                id=node_id or uuid7(),
                name=name,
                path=_join_path(parent, name),
                size=0 if is_folder else size,
                type=FOLDER_MIME_TYPE if is_folder else (content_type or DEFAULT_FILE_TYPE),
                file_url=None if is_folder else file_url,
                thumbnail_url=None if is_folder else thumbnail_url,
                owner_id=owner_id,
                parent_id=parent_id,
                is_folder=is_folder,
            )
            self.db.add(node)

        logger.info(f"Created {variant.value}: owner={owner_id}, id={node.id}, path={node.path}")
        return node

    async def upload_file(
        self,
        owner_id: str,
        filename: str,
        content: bytes,
        *,
        parent_id: uuid.UUID | None = None,
        content_type: str | None = None,
    ) -> FileNode:
        """
        Store bytes in object storage, then record the file node.
        The uploaded object is released again if the node cannot be created.
        """
        if self.storage is None:
            raise StorageUnavailable("Object storage is not configured")

        name = validate_node_name(filename)
        node_id = uuid7()
        file_url = await self.storage.upload(owner_id, node_id, name, content, content_type)

        try:
            return await self.create_node(
                owner_id,
                name,
                parent_id,
                FileVariant.FILE,
                size=len(content),
                content_type=content_type,
                file_url=file_url,
                thumbnail_url=file_url if is_image_type(content_type) else None,
                node_id=node_id,
            )
        except Exception:
            if not await self.storage.delete(file_url):
                logger.error(f"Orphaned object left in storage: {file_url}")
            raise

    async def rename(self, owner_id: str, node_id: uuid.UUID, new_name: str) -> FileNode:
        """
        Rename a node; paths below a renamed folder follow
        """
        new_name = validate_node_name(new_name)

        async with self._transaction("rename"):
            node = await self._get_owned(owner_id, node_id, lock=True)
            if node.name == new_name:
                return node

            if not node.is_trash:
                await self._ensure_unique_name(owner_id, node.parent_id, new_name, exclude_id=node.id)

            parent = None
            if node.parent_id is not None:
                parent = await self._get_owned(owner_id, node.parent_id)

            old_name = node.name
            node.name = new_name
            node.path = _join_path(parent, new_name)
            node.updated_at = _now()
            if node.is_folder:
                self._rewrite_paths(node, await self._load_descendants(owner_id, node.id, lock=True))

        logger.info(f"Renamed: owner={owner_id}, id={node_id}, {old_name} -> {new_name}")
        return node

    async def move(self, owner_id: str, node_id: uuid.UUID, new_parent_id: uuid.UUID | None) -> FileNode:
        """
        Re-parent a node (None = owner's root). Moving to the current parent is a no-op.
        """
        async with self._transaction("move"):
            node = await self._get_owned(owner_id, node_id, lock=True)
            if node.parent_id == new_parent_id:
                return node
            if new_parent_id == node.id:
                raise CyclicMove(f"Cannot move {node.name} into itself")

            parent = await self._get_parent(owner_id, new_parent_id)
            ancestors: list[FileNode] = []
            if parent is not None:
                ancestors = await self._walk_ancestors(owner_id, parent)
                if any(ancestor.id == node.id for ancestor in ancestors):
                    raise CyclicMove(f"Cannot move {node.name} into its own subfolder {parent.name}")

            descendants = await self._load_descendants(owner_id, node.id, lock=True) if node.is_folder else []
            self._ensure_depth(len(ancestors), self._subtree_height(node, descendants), parent)

            if not node.is_trash:
                await self._ensure_unique_name(owner_id, new_parent_id, node.name, exclude_id=node.id)

            node.parent_id = new_parent_id
            node.path = _join_path(parent, node.name)
            node.updated_at = _now()
            if descendants:
                self._rewrite_paths(node, descendants)

        logger.info(f"Moved: owner={owner_id}, id={node_id}, parent={new_parent_id}, path={node.path}")
        return node

    async def toggle_star(self, owner_id: str, node_id: uuid.UUID, value: bool) -> FileNode:
        async with self._transaction("toggle_star"):
            node = await self._get_owned(owner_id, node_id, lock=True)
            if node.is_starred != value:
                node.is_starred = value
                node.updated_at = _now()
        return node

    async def trash(self, owner_id: str, node_id: uuid.UUID) -> int:
        """
        Move a node and its whole subtree to the trash

        Returns:
            Number of nodes whose flag changed
        """
        async with self._transaction("trash"):
            node = await self._get_owned(owner_id, node_id, lock=True)
            nodes = [node] + await self._load_descendants(owner_id, node.id, lock=True)

            now = _now()
            affected = 0
            for n in nodes:
                if not n.is_trash:
                    n.is_trash = True
                    n.updated_at = now
                    affected += 1

        logger.info(f"Trashed: owner={owner_id}, id={node_id}, affected={affected}")
        return affected

    async def restore(self, owner_id: str, node_id: uuid.UUID) -> int:
        """
        Bring a node and its whole subtree back from the trash.
        If the parent is missing or still trashed, the node is restored to the root.

        Returns:
            Number of nodes whose flag changed
        """
        async with self._transaction("restore"):
            node = await self._get_owned(owner_id, node_id, lock=True)
            descendants = await self._load_descendants(owner_id, node.id, lock=True)

            relocated = False
            if node.parent_id is not None:
                stmt = self._owned(owner_id).where(FileNode.id == node.parent_id)  # type: ignore[arg-type]
                parent = (await self.db.execute(stmt)).scalar_one_or_none()
                if parent is None or parent.is_trash:
                    node.parent_id = None
                    node.path = _join_path(None, node.name)
                    relocated = True

            await self._ensure_unique_name(owner_id, node.parent_id, node.name, exclude_id=node.id)

            now = _now()
            affected = 0
            for n in [node] + descendants:
                if n.is_trash:
                    n.is_trash = False
                    n.updated_at = now
                    affected += 1

            if relocated:
                self._rewrite_paths(node, descendants)
            self._ensure_unique_within(descendants)

        logger.info(f"Restored: owner={owner_id}, id={node_id}, affected={affected}, relocated={relocated}")
        return affected

    async def purge(self, owner_id: str, node_id: uuid.UUID) -> PurgeResult:
        """
        Permanently delete a node and every descendant, then release their stored content
        """
        async with self._transaction("purge"):
            node = await self._get_owned(owner_id, node_id, lock=True)
            nodes = [node] + await self._load_descendants(owner_id, node.id, lock=True)
            result = await self._delete_nodes(owner_id, nodes)

        return await self._release(owner_id, result)

    async def empty_trash(self, owner_id: str) -> PurgeResult:
        """
        Permanently delete everything in the owner's trash
        """
        async with self._transaction("empty_trash"):
            stmt = self._owned(owner_id).where(FileNode.is_trash.is_(True)).with_for_update()  # type: ignore[attr-defined]
            nodes = list((await self.db.execute(stmt)).scalars().all())
            result = await self._delete_nodes(owner_id, nodes)

        return await self._release(owner_id, result)

    async def _delete_nodes(self, owner_id: str, nodes: list[FileNode]) -> PurgeResult:
        if not nodes:
            return PurgeResult()

        ids = [n.id for n in nodes]
        urls = [url for n in nodes for url in (n.file_url, n.thumbnail_url) if url]
        # One statement, so the self-referencing foreign key never sees a half-deleted subtree
        await self.db.execute(
            delete(FileNode)
            .where(FileNode.owner_id == owner_id)  # type: ignore[arg-type]
            .where(FileNode.id.in_(ids))  # type: ignore[attr-defined]
        )
        return PurgeResult(purged_ids=ids, unreleased_urls=list(dict.fromkeys(urls)))

    async def _release(self, owner_id: str, result: PurgeResult) -> PurgeResult:
        """Release stored content after the rows are gone; failures and foreign URLs stay listed as unreleased"""
        if result.purged_ids:
            logger.info(f"Purged: owner={owner_id}, count={len(result.purged_ids)}")

        if self.storage is None or not result.unreleased_urls:
            return result

        owned = [url for url in result.unreleased_urls if self.storage.is_owned_url(owner_id, url)]
        foreign = [url for url in result.unreleased_urls if url not in owned]
        if foreign:
            logger.warning(f"Skipped release of URLs outside the owner's storage area: owner={owner_id}, urls={foreign}")

        released, unreleased = await self.storage.delete_many(owned)
        result.released_urls = released
        result.unreleased_urls = unreleased + foreign
        if unreleased:
            logger.error(f"Purge left {len(unreleased)} object(s) in storage: owner={owner_id}, urls={unreleased}")
        return result

    #
    # Queries
    #

    async def get_node(self, owner_id: str, node_id: uuid.UUID) -> FileNode:
        async with self._transaction("get_node"):
            return await self._get_owned(owner_id, node_id)

    async def iter_children(
        self,
        owner_id: str,
        parent_id: uuid.UUID | None = None,
        *,
        include_trash: bool = False,
    ) -> AsyncIterator[FileNode]:
        """
        Lazily yield the children of parent_id (None = owner's root), ordered by id.
        Rows are fetched in keyset pages of page_size; every call starts over.
        """
        if parent_id is not None:
            await self.get_node(owner_id, parent_id)

        last_id: uuid.UUID | None = None
        while True:
            stmt = self._owned(owner_id)
            if parent_id is None:
                stmt = stmt.where(FileNode.parent_id.is_(None))  # type: ignore[union-attr]
            else:
                stmt = stmt.where(FileNode.parent_id == parent_id)  # type: ignore[arg-type]
            if not include_trash:
                stmt = stmt.where(FileNode.is_trash.is_(False))  # type: ignore[attr-defined]
            if last_id is not None:
                stmt = stmt.where(FileNode.id > last_id)  # type: ignore[arg-type]
            stmt = stmt.order_by(FileNode.id).limit(self.page_size)  # type: ignore[arg-type]

            async with self._transaction("list_children"):
                page = list((await self.db.execute(stmt)).scalars().all())

            for node in page:
                yield node
            if len(page) < self.page_size:
                return
            last_id = page[-1].id

    async def list_children(
        self,
        owner_id: str,
        parent_id: uuid.UUID | None = None,
        *,
        include_trash: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> list[FileNode]:
        nodes: list[FileNode] = []
        index = 0
        async with aclosing(self.iter_children(owner_id, parent_id, include_trash=include_trash)) as children:
            async for node in children:
                if index >= skip:
                    nodes.append(node)
                    if len(nodes) >= limit:
                        break
                index += 1
        return nodes

    async def list_nodes(
        self,
        owner_id: str,
        option: FileListOption,
        *,
        skip: int = 0,
        limit: int = 100,
    ) -> list[FileNode]:
        """
        Owner-wide listings

        Options:
        - all-files: every live file (folders excluded)
        - starred: every live starred file or folder
        - trash: trashed items whose parent is not itself trashed
        """
        stmt = self._owned(owner_id)
        if option == FileListOption.ALL_FILES:
            stmt = stmt.where(FileNode.is_folder.is_(False)).where(FileNode.is_trash.is_(False))  # type: ignore[attr-defined]
        elif option == FileListOption.STARRED:
            stmt = stmt.where(FileNode.is_starred.is_(True)).where(FileNode.is_trash.is_(False))  # type: ignore[attr-defined]
        else:
            parent = aliased(FileNode)
            stmt = (
                stmt.outerjoin(parent, and_(parent.id == FileNode.parent_id, parent.owner_id == owner_id))
                .where(FileNode.is_trash.is_(True))  # type: ignore[attr-defined]
                .where(or_(parent.id.is_(None), parent.is_trash.is_(False)))
            )
        stmt = stmt.order_by(FileNode.id).offset(skip).limit(limit)  # type: ignore[arg-type]

        async with self._transaction("list_nodes"):
            return list((await self.db.execute(stmt)).scalars().all())

    async def resolve_path(self, owner_id: str, node_id: uuid.UUID) -> ResolvedPath:
        """
        Walk parent_id from the node to the root and materialize its path
        """
        async with self._transaction("resolve_path"):
            node = await self._get_owned(owner_id, node_id)
            chain = await self._walk_ancestors(owner_id, node)
        return ResolvedPath(ancestors=list(reversed(chain)))


async def get_file_tree_service(
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorageClient = Depends(get_object_storage),
) -> FileTreeService:
    """
    Dependency for getting the file tree service bound to the request's session
    """
    return FileTreeService(db, storage)
