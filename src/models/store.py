from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import BaseModel


class StoreEntry(BaseModel):
    """One named slot of the key-value store, holding a JSON-encoded collection."""

    __tablename__ = "store_entries"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text, default="[]")
