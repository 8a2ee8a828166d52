"""Shared base for stored storefront records.

Records are immutable once stored; repositories replace them with
``model_copy(update=...)`` instead of mutating in place.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class StoredRecord(BaseModel):
    """Base class for records owned by a storage backend."""

    model_config = ConfigDict(frozen=True)

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Datetimes are stored as ISO-8601 strings, enums as their values and
        unset optional attributes are omitted.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {}
        for key, value in self.model_dump(exclude_none=True).items():
            if isinstance(value, datetime):
                item[key] = value.isoformat()
            elif isinstance(value, Enum):
                item[key] = value.value
            else:
                item[key] = value
        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> Self:
        """Create a record from a DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Parsed model instance
        """
        return cls.model_validate(item)
