# Key-value storage clients
from clients.errors import StorageError
from clients.local_store import LocalStore
from clients.valkey_client import ValkeyStore


def create_store(config) -> "LocalStore | ValkeyStore":
    """
    Build the storage backend selected by an InvoiceConfig.

    Raises:
        ValueError: If the backend is unknown or missing its settings
    """
    if config.storage_backend == "local":
        return LocalStore(config.storage_path)

    if config.storage_backend == "valkey":
        if not config.valkey_url:
            raise ValueError("valkey_url is required when storage_backend is 'valkey'")
        return ValkeyStore(config.valkey_url)

    raise ValueError(f"Unknown storage backend: {config.storage_backend}")
