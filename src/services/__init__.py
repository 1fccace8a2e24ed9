from src.services import (
    auth,
    engine,
    fees,
    report,
    storage,
)

__all__ = [
    "auth",
    "engine",
    "fees",
    "report",
    "storage",
]
