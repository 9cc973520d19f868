# Vault - File Blobs
#
# Files travel through the same payload variants as text: the raw bytes are
# base64-encoded to text, optionally sealed, and decoded back to bytes on
# retrieval where they are written to a target path.
#
# Target path: explicit --out wins, otherwise <files_dir>/<key>.<encoding>
# ("bin" encoding means the bare key name, no extension).

import base64
import logging
from pathlib import Path
from typing import Optional, Union

from .encryption import AuthenticatedCipher
from .exceptions import CorruptRecord, UnsafeFileName
from .typed_value import Category, Encrypted, ItemKind, Plaintext, TypedValue

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

BARE_ENCODING = "bin"


def category_for_file(path: PathLike, kind: ItemKind = ItemKind.FILE) -> Category:
    """Category from the file suffix, "bin" when there is none."""
    suffix = Path(path).suffix.lstrip(".").lower()
    return Category(kind=kind, encoding=suffix or BARE_ENCODING)


def encode_file(
    path: PathLike,
    password: str = "",
    kind: ItemKind = ItemKind.FILE,
) -> TypedValue:
    """Read a file and wrap it as a TypedValue.

    The bytes are base64-encoded to text. With a password the text is sealed
    (Encrypted payload), without one it is stored as Plaintext.

    Args:
        path: File to store.
        password: Password to seal with ("" stores the base64 text as-is).
        kind: One of the file kinds (image, video, file).

    Returns:
        TypedValue with category "<kind>/<extension-or-bin>".

    Raises:
        FileNotFoundError: If path doesn't exist.
        ValueError: If kind is not a file kind.
    """
    if not kind.is_file:
        raise ValueError(f"Not a file kind: {kind.value}")

    source = Path(path)
    if not source.is_file():
        raise FileNotFoundError(f"Source file not found: {path}")

    text = base64.b64encode(source.read_bytes()).decode("ascii")
    category = category_for_file(source, kind)
    logger.debug("Encoded %s as %s (%d base64 chars)", source.name, category, len(text))

    if password:
        return TypedValue(Encrypted(AuthenticatedCipher.seal(text, password)), category)
    return TypedValue(Plaintext(text), category)


def default_file_name(key: str, category: Category) -> str:
    """File name for a retrieved item: the key, plus the encoding as extension.

    Raises:
        UnsafeFileName: The name would leave the target directory
    """
    name = key if category.encoding == BARE_ENCODING else f"{key}.{category.encoding}"
    if not key or Path(name).name != name or name in (".", ".."):
        raise UnsafeFileName(
            f"Key {key!r} cannot be used as a file name. Use --out to choose a path."
        )
    return name


def resolve_target_path(
    key: str,
    category: Category,
    files_dir: PathLike,
    out: Optional[PathLike] = None,
) -> Path:
    """Where a retrieved file item is written.

    An explicit out path wins; an existing directory as out gets the
    default file name appended.
    """
    if out is not None:
        target = Path(out).expanduser()
        return target / default_file_name(key, category) if target.is_dir() else target
    return Path(files_dir) / default_file_name(key, category)


def decode_to_path(
    value: TypedValue,
    target_path: PathLike,
    opened: Optional[bytes] = None,
) -> Path:
    """Write the file bytes held by value to target_path.

    For an Encrypted payload the caller opens the blob first and passes the
    recovered base64 text as opened.

    Returns:
        The path written.

    Raises:
        ValueError: Encrypted payload without opened bytes.
        CorruptRecord: Stored file data is not valid base64.
    """
    if isinstance(value.payload, Plaintext):
        encoded = value.payload.text
    elif opened is not None:
        encoded = opened
    else:
        raise ValueError("Encrypted file payload must be opened before decoding")

    try:
        if isinstance(encoded, str):
            encoded = encoded.encode("ascii")
        data = base64.b64decode(encoded, validate=True)
    except ValueError as e:
        raise CorruptRecord(f"Corrupted file data: invalid base64 ({e})") from e

    target = Path(target_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    logger.debug("Wrote %d bytes to %s", len(data), target)
    return target
