# Vault - Item Engine
#
# Upsert and retrieve-with-retry for typed vault items.
#
# Write path:  value / file bytes → (seal) → TypedValue → db.set(key, record)
# Read path:   db.get(key) → TypedValue → (PasswordRetry + open) → text, or
#              file bytes written to disk and the path returned
#
# The engine does not own database lifetime: it works on the DictStore handle
# passed in for the duration of one call.

import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from ..core.audit_log import EventSeverity, EventType, get_audit_logger
from ..core.config import VaultConfig
from ..core.store import DictStore
from .encryption import AuthenticatedCipher
from .exceptions import CorruptRecord, MissingKey, VaultException
from .file_blob import decode_to_path, encode_file, resolve_target_path
from .retry import DEFAULT_PROMPT, MAX_PASSWORD_ATTEMPTS, PasswordRetry, PasswordSource
from .typed_value import Category, Encrypted, Plaintext, TypedValue

logger = logging.getLogger(__name__)


class VaultItemEngine:
    """
    Stores and retrieves typed items in a vault database.

    Security:
    - Each encrypted item has its own random nonce/salt
    - Passwords are never stored; a wrong password is only detected by a
      failed decryption
    - Item values and passwords never reach the audit log
    """

    def __init__(
        self,
        config: VaultConfig,
        password_source: PasswordSource,
        *,
        max_attempts: int = MAX_PASSWORD_ATTEMPTS,
        on_retry: Optional[Callable[[int, int], None]] = None,
    ):
        """
        Args:
            config: Vault configuration (files_dir is where files are written)
            password_source: Called with a prompt label, returns a password
            max_attempts: Password attempts allowed per encrypted read
            on_retry: Called with (attempt, max_attempts) after a failed
                      attempt that will be retried
        """
        self.config = config
        self.password_source = password_source
        self.max_attempts = max_attempts
        self.on_retry = on_retry
        self.audit = get_audit_logger()

    # ── Write ────────────────────────────────────────────────────────

    def build_value(self, password: str, value: str, category: Union[str, Category]) -> TypedValue:
        """
        Turn a raw value into the TypedValue that upsert() would store.

        Raises:
            UnsupportedCategory: Kind is not data, image, video or file
            FileNotFoundError: File kind and value is not an existing file
        """
        if not isinstance(category, Category):
            category = Category.parse(category)

        # File handling supersedes the plain value path
        if category.is_file:
            return encode_file(value, password, category.kind)

        if password:
            if category.encoding == "str":
                category = category.with_encoding("byte")
            return TypedValue(Encrypted(AuthenticatedCipher.seal(value, password)), category)

        return TypedValue(Plaintext(value), category)

    def upsert(
        self,
        db: DictStore,
        key: str,
        password: str,
        value: str,
        category: Union[str, Category] = "data/str",
    ) -> TypedValue:
        """
        Insert or replace the item stored under key.

        Everything that can fail (category validation, file read, sealing)
        happens before the single db.set() call, so a failed upsert leaves
        the database untouched.

        Args:
            db: Database handle
            key: Item key
            password: Password to seal with ("" stores the value in plain text)
            value: Text value, or a file path for file kinds
            category: "<kind>/<encoding>" tag

        Returns:
            The TypedValue that was stored
        """
        typed = self.build_value(password, value, category)
        db.set(key, typed.to_record())

        self.audit.log_item_event(
            EventType.ITEM_SET,
            db_name=db.name,
            key=key,
            details={"category": str(typed.category), "encrypted": typed.is_encrypted},
        )
        logger.debug("Stored %s in %s as %s", key, db.name, typed.category)
        return typed

    # ── Read ─────────────────────────────────────────────────────────

    def load(self, db: DictStore, key: str) -> Optional[TypedValue]:
        """TypedValue stored under key, or None."""
        record = db.get(key)
        if record is None:
            return None
        return TypedValue.from_record(record)

    def retrieve(
        self,
        db: DictStore,
        key: str,
        out: Optional[Union[str, Path]] = None,
        missing_ok: bool = True,
    ) -> str:
        """
        Get the displayable value of key.

        Data items return their text. File items are written to disk
        (out, or the files directory) and the written path is returned.
        Encrypted items prompt for the password through PasswordRetry.

        Args:
            db: Database handle
            key: Item key
            out: Target path for file items
            missing_ok: Return "" for a missing key instead of raising

        Raises:
            MissingKey: Key absent and missing_ok is False
            PasswordAttemptsExhausted: Wrong password max_attempts times
        """
        typed = self.load(db, key)
        if typed is None:
            self.audit.log_item_event(
                EventType.ITEM_MISSING, db_name=db.name, key=key, severity=EventSeverity.INFO
            )
            if missing_ok:
                logger.warning("Key %s not found in %s; returning empty value", key, db.name)
                return ""
            raise MissingKey(f"Key {key} not found, perhaps it doesn't exist at all?")

        if isinstance(typed.payload, Plaintext):
            result = self._render(key, typed, None, out)
        else:
            opened = self.open_with_retry(db, key, typed.payload)
            result = self._render(key, typed, opened, out)

        self.audit.log_item_event(
            EventType.ITEM_ACCESSED,
            db_name=db.name,
            key=key,
            details={"category": str(typed.category), "encrypted": typed.is_encrypted},
        )
        return result

    def open_with_retry(self, db: DictStore, key: str, payload: Encrypted) -> bytes:
        """Prompt for the password until the payload opens (three strikes)."""

        def on_failure(attempt: int, max_attempts: int) -> None:
            self.audit.log_item_event(
                EventType.ITEM_UNLOCK_FAILED,
                db_name=db.name,
                key=key,
                severity=EventSeverity.ALERT,
                details={"attempt": attempt, "max_attempts": max_attempts},
            )
            if self.on_retry is not None:
                self.on_retry(attempt, max_attempts)

        retry = PasswordRetry(
            self.password_source,
            max_attempts=self.max_attempts,
            label=DEFAULT_PROMPT,
            on_failure=on_failure,
        )
        try:
            return retry.run(lambda password: AuthenticatedCipher.open(payload.blob, password))
        except VaultException:
            self.audit.log_item_event(
                EventType.ITEM_UNLOCK_FAILED,
                db_name=db.name,
                key=key,
                severity=EventSeverity.CRITICAL,
                details={"attempt": retry.attempts, "max_attempts": self.max_attempts},
            )
            raise

    def _render(
        self,
        key: str,
        typed: TypedValue,
        opened: Optional[bytes],
        out: Optional[Union[str, Path]],
    ) -> str:
        if typed.category.is_file:
            target = resolve_target_path(key, typed.category, self.config.files_dir, out)
            return str(decode_to_path(typed, target, opened))
        if opened is not None:
            try:
                return opened.decode("utf-8")
            except UnicodeDecodeError as e:
                raise CorruptRecord(f"Value of {key} is not valid UTF-8 text") from e
        return typed.payload.text

    # ── Remove / list ────────────────────────────────────────────────

    def remove(self, db: DictStore, key: str) -> None:
        if not db.remove(key):
            raise MissingKey(f"Key {key} not found, perhaps it doesn't exist at all?")
        self.audit.log_item_event(EventType.ITEM_REMOVED, db_name=db.name, key=key)

    def describe(self, db: DictStore) -> List[Tuple[str, str]]:
        """(key, label) per item, in insertion order."""
        return [(key, self.load(db, key).label) for key in db.list_keys()]
