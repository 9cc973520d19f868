# Vault Module - Encrypted Typed Values
#
# Password → key (Argon2i), XChaCha20-Poly1305 sealing, typed items that mix
# plain and encrypted values under one key namespace, and the three-strikes
# password retry used on read.

from .exceptions import (
    CipherError,
    CiphertextTooShort,
    CorruptRecord,
    InvalidKeyOrCiphertext,
    KeyDerivationError,
    MissingKey,
    PasswordAttemptsExhausted,
    PayloadTooLarge,
    UnsafeFileName,
    UnsupportedCategory,
    VaultException,
)
from .encryption import AuthenticatedCipher, KeyDerivation
from .typed_value import Category, Encrypted, ItemKind, Plaintext, TypedValue
from .file_blob import decode_to_path, encode_file, resolve_target_path
from .retry import PasswordRetry, RetryState
from .item_engine import VaultItemEngine

__all__ = [
    "AuthenticatedCipher",
    "KeyDerivation",
    "Category",
    "Encrypted",
    "ItemKind",
    "Plaintext",
    "TypedValue",
    "encode_file",
    "decode_to_path",
    "resolve_target_path",
    "PasswordRetry",
    "RetryState",
    "VaultItemEngine",
    # Exceptions
    "VaultException",
    "KeyDerivationError",
    "PayloadTooLarge",
    "CipherError",
    "CiphertextTooShort",
    "InvalidKeyOrCiphertext",
    "PasswordAttemptsExhausted",
    "UnsupportedCategory",
    "MissingKey",
    "CorruptRecord",
    "UnsafeFileName",
]
