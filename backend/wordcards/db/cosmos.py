"""
Cosmos DB client, settings and container provisioning.

Two containers back the service:
- folders, partitioned by /id
- cards, partitioned by /folderId, so a folder's cards are read with a
  single-partition query

Credentials come from DefaultAzureCredential (Managed Identity in Azure,
`az login` locally), or from the emulator's well-known key when
COSMOS_EMULATOR=true.
"""

import os
import logging
from functools import lru_cache
from azure.cosmos import ContainerProxy, CosmosClient, DatabaseProxy, PartitionKey
from azure.cosmos.exceptions import CosmosHttpResponseError
from azure.identity import DefaultAzureCredential

logger = logging.getLogger(__name__)

# Cosmos DB Emulator well-known key (public, not a secret)
# https://learn.microsoft.com/en-us/azure/cosmos-db/emulator#authentication
EMULATOR_KEY = "C2y6yDjf5/R+ob0N8A7Cgv30VRDJIWEHLM+4QDU5DE2nQ9nDuVTqobD4b8mGGyPMbIZnqyMsEcaGQy67XIw/Jw=="
EMULATOR_ENDPOINT = "https://localhost:8081"

FOLDERS_PARTITION_KEY = "/id"
CARDS_PARTITION_KEY = "/folderId"


class CosmosDBSettings:
    """Cosmos DB connection settings read from the environment."""

    def __init__(self):
        self.endpoint = os.getenv("COSMOS_ENDPOINT", "")
        self.database_name = os.getenv("COSMOS_DB_NAME", "wordcards")
        self.folders_container = os.getenv("COSMOS_FOLDERS_CONTAINER", "folders")
        self.cards_container = os.getenv("COSMOS_CARDS_CONTAINER", "cards")
        self.use_emulator = os.getenv("COSMOS_EMULATOR", "false").lower() == "true"
        self.create_if_missing = os.getenv("COSMOS_CREATE_IF_MISSING", "false").lower() == "true"

    def is_configured(self) -> bool:
        # The emulator always listens on its well-known endpoint
        return self.use_emulator or bool(self.endpoint)


@lru_cache()
def get_settings() -> CosmosDBSettings:
    """Get cached Cosmos DB settings."""
    return CosmosDBSettings()


_client: CosmosClient | None = None
_database: DatabaseProxy | None = None


def get_client() -> CosmosClient:
    """Get or create the Cosmos DB client."""
    global _client
    if _client is not None:
        return _client

    settings = get_settings()
    if not settings.is_configured():
        raise RuntimeError(
            "Cosmos DB is not configured. "
            "Set COSMOS_ENDPOINT, or COSMOS_EMULATOR=true for the local emulator."
        )

    if settings.use_emulator:
        logger.info("Using Cosmos DB Emulator at %s", EMULATOR_ENDPOINT)
        # The emulator serves a self-signed certificate
        _client = CosmosClient(EMULATOR_ENDPOINT, credential=EMULATOR_KEY, connection_verify=False)
    else:
        logger.info("Using DefaultAzureCredential for Cosmos DB at %s", settings.endpoint)
        _client = CosmosClient(settings.endpoint, credential=DefaultAzureCredential())
    return _client


def get_database() -> DatabaseProxy:
    """Get the database proxy, creating the database first when allowed."""
    global _database
    if _database is None:
        settings = get_settings()
        client = get_client()
        if settings.create_if_missing:
            _database = client.create_database_if_not_exists(id=settings.database_name)
        else:
            _database = client.get_database_client(settings.database_name)
    return _database


def get_container(container_name: str) -> ContainerProxy:
    return get_database().get_container_client(container_name)


def get_folders_container() -> ContainerProxy:
    return get_container(get_settings().folders_container)


def get_cards_container() -> ContainerProxy:
    return get_container(get_settings().cards_container)


def ensure_containers() -> None:
    """Create the folders and cards containers if they do not exist yet."""
    settings = get_settings()
    database = get_database()
    for name, partition_key in (
        (settings.folders_container, FOLDERS_PARTITION_KEY),
        (settings.cards_container, CARDS_PARTITION_KEY),
    ):
        database.create_container_if_not_exists(id=name, partition_key=PartitionKey(path=partition_key))
        logger.info("Container %s ready (partition key %s)", name, partition_key)


def verify_connection() -> bool:
    """Verify the Cosmos DB connection is working."""
    settings = get_settings()
    if not settings.is_configured():
        return False
    try:
        get_database().read()
        return True
    except CosmosHttpResponseError as e:
        logger.warning("Cosmos DB connection check failed: %s", e)
        return False
    except Exception as e:
        logger.warning("Cosmos DB unreachable: %s", e)
        return False


def close_client() -> None:
    """Drop the cached client and database proxies."""
    global _client, _database
    _client = None
    _database = None
