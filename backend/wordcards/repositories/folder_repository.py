"""Repository for Folder CRUD operations."""

from azure.cosmos import ContainerProxy
from azure.cosmos.exceptions import CosmosResourceNotFoundError

from wordcards.db import get_folders_container
from wordcards.models import Folder, FolderCreate


class FolderNotFoundError(Exception):
    """Raised when a folder is not found."""

    pass


class FolderRepository:
    """Repository for Folder database operations."""

    def __init__(self, container: ContainerProxy | None = None):
        self._container = container

    @property
    def container(self) -> ContainerProxy:
        """Get the container, lazily initializing if needed."""
        if self._container is None:
            self._container = get_folders_container()
        return self._container

    def list_all(self) -> list[Folder]:
        """List all folders, oldest first."""
        items = self.container.query_items(
            query="SELECT * FROM c ORDER BY c.createdAt ASC",
            enable_cross_partition_query=True,
        )
        return [Folder(**item) for item in items]

    def get_by_id(self, folder_id: str) -> Folder:
        try:
            item = self.container.read_item(item=folder_id, partition_key=folder_id)
        except CosmosResourceNotFoundError:
            raise FolderNotFoundError(f"Folder with ID {folder_id} not found")
        return Folder(**item)

    def create(self, folder_create: FolderCreate) -> Folder:
        folder = Folder(name=folder_create.name)
        created_item = self.container.create_item(body=folder.model_dump())
        return Folder(**created_item)

    def delete(self, folder_id: str) -> None:
        try:
            self.container.delete_item(item=folder_id, partition_key=folder_id)
        except CosmosResourceNotFoundError:
            raise FolderNotFoundError(f"Folder with ID {folder_id} not found")

    def exists(self, folder_id: str) -> bool:
        try:
            self.get_by_id(folder_id)
            return True
        except FolderNotFoundError:
            return False


# Singleton instance
_folder_repository: FolderRepository | None = None


def get_folder_repository() -> FolderRepository:
    """Get the folder repository singleton."""
    global _folder_repository
    if _folder_repository is None:
        _folder_repository = FolderRepository()
    return _folder_repository
