"""Custom SQLAlchemy types with cross-DB support."""

import uuid
from typing import Iterable, List, Optional

from sqlalchemy import String, Text, TypeDecorator

TAG_SEPARATOR = ","


def normalize_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Trim, lowercase and de-duplicate tags, keeping first-seen order."""
    result: List[str] = []
    for raw in tags or ():
        tag = str(raw).strip().lower()
        if tag and tag not in result:
            result.append(tag)
    return result


class TagListType(TypeDecorator):
    """
    Store an ordered list of tags as one comma-joined TEXT value.

    The domain model only ever sees ``List[str]``; the joined string exists
    purely at the storage boundary. An empty list is stored as an empty string.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Optional[Iterable[str]], dialect):
        if value is None:
            return ""
        if isinstance(value, str):
            value = value.split(TAG_SEPARATOR)
        return TAG_SEPARATOR.join(normalize_tags(value))

    def process_result_value(self, value, dialect) -> List[str]:
        if not value:
            return []
        return normalize_tags(value.split(TAG_SEPARATOR))


class GUID(TypeDecorator):
    """
    Platform-independent GUID/UUID type.

    - Uses PostgreSQL UUID type when available
    - Falls back to CHAR(36) storing hex string form on other DBs (e.g., SQLite)
    """

    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID as PG_UUID

            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if dialect.name == "postgresql":
            return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(str(value))
