# Vault - Typed Values
#
# One stored item = payload variant + category.
#   payload:  Plaintext(text) | Encrypted(blob)
#   category: "<kind>/<encoding>", kind ∈ {data, image, video, file}
#
# The category is parsed and validated once (Category.parse) and carried as a
# closed enum kind plus a free-form encoding string.

import base64
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union

from .exceptions import CorruptRecord, UnsupportedCategory

PASSWORD_PROTECTED_LABEL = "password protected"


class ItemKind(str, Enum):
    """First segment of a category tag."""
    DATA = "data"
    IMAGE = "image"
    VIDEO = "video"
    FILE = "file"

    @property
    def is_file(self) -> bool:
        """Image, video and file items are written back to disk on retrieval."""
        return self is not ItemKind.DATA


FILE_KINDS = frozenset(kind for kind in ItemKind if kind.is_file)


@dataclass(frozen=True)
class Category:
    """Validated "<kind>/<encoding>" tag."""
    kind: ItemKind
    encoding: str

    @classmethod
    def parse(cls, tag: str) -> "Category":
        """
        Parse a category tag.

        A tag without an encoding gets the default for its kind
        ("data" → "data/str", "file" → "file/bin").

        Raises:
            UnsupportedCategory: Kind is not data, image, video or file
        """
        kind_name, _, encoding = tag.strip().partition("/")
        try:
            kind = ItemKind(kind_name.lower())
        except ValueError:
            supported = ", ".join(k.value for k in ItemKind)
            raise UnsupportedCategory(
                f"Unsupported type: {kind_name!r} (expected one of: {supported})"
            ) from None

        encoding = encoding.strip() or ("bin" if kind.is_file else "str")
        return cls(kind=kind, encoding=encoding)

    @property
    def is_file(self) -> bool:
        return self.kind.is_file

    def with_encoding(self, encoding: str) -> "Category":
        return Category(kind=self.kind, encoding=encoding)

    def __str__(self) -> str:
        return f"{self.kind.value}/{self.encoding}"


@dataclass(frozen=True)
class Plaintext:
    """Payload stored as-is."""
    text: str


@dataclass(frozen=True)
class Encrypted:
    """Payload sealed by AuthenticatedCipher."""
    blob: bytes


Payload = Union[Plaintext, Encrypted]


@dataclass(frozen=True)
class TypedValue:
    """Persisted representation of one vault item."""
    payload: Payload
    category: Category

    @property
    def is_encrypted(self) -> bool:
        return isinstance(self.payload, Encrypted)

    @property
    def label(self) -> str:
        """Short description used when listing keys."""
        if self.is_encrypted:
            return f"{self.category}, {PASSWORD_PROTECTED_LABEL}"
        return str(self.category)

    def to_record(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable record for the store."""
        if isinstance(self.payload, Encrypted):
            return {
                "payload": "encrypted",
                "data": base64.b64encode(self.payload.blob).decode("ascii"),
                "category": str(self.category),
            }
        return {
            "payload": "plaintext",
            "data": self.payload.text,
            "category": str(self.category),
        }

    @classmethod
    def from_record(cls, record: Any) -> "TypedValue":
        """
        Rebuild a TypedValue from a store record.

        Older databases stored bare values: a string for plain items and a
        list of byte values for encrypted ones. Both are still accepted.

        Raises:
            CorruptRecord: Record shape or data cannot be decoded
            UnsupportedCategory: Stored category kind is unknown
        """
        if isinstance(record, str):
            return cls(Plaintext(record), Category(ItemKind.DATA, "str"))
        if isinstance(record, list):
            try:
                blob = bytes(record)
            except (TypeError, ValueError) as e:
                raise CorruptRecord(f"Corrupted vault record: {e}") from e
            return cls(Encrypted(blob), Category(ItemKind.DATA, "byte"))
        if not isinstance(record, dict):
            raise CorruptRecord(f"Unrecognized vault record: {type(record).__name__}")

        tag = record.get("category", "data/str")
        data = record.get("data", "")
        if not isinstance(tag, str) or not isinstance(data, str):
            raise CorruptRecord("Corrupted vault record: category and data must be text")

        category = Category.parse(tag)
        if record.get("payload") == "encrypted":
            try:
                blob = base64.b64decode(data.encode("ascii"), validate=True)
            except ValueError as e:
                raise CorruptRecord(f"Corrupted vault record: invalid base64 data ({e})") from e
            return cls(Encrypted(blob), category)
        return cls(Plaintext(data), category)
