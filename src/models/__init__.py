from src.models.store import StoreEntry

__all__ = [
    "StoreEntry",
]
