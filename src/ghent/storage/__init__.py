from ghent.storage.memory import InMemoryStorage, MemoryClient
from ghent.storage.protocols import StorageProtocol

__all__ = ["InMemoryStorage", "MemoryClient", "StorageProtocol"]
