"""CartLift — Key-Value Storage Table."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class KeyValueEntry(SQLModel, table=True):
    """One string value stored under a string key.

    Backs ``SqlKeyValueStore``; values are opaque JSON documents.
    """

    __tablename__ = "key_value_entries"

    key: str = Field(primary_key=True, description="Store key, e.g. saved-calculations")
    value: str = Field(description="Serialized JSON value")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
