# Vault - Encryption Service
#
# Password → key (Argon2i, memory-hard)
# Payload sealing (XChaCha20-Poly1305, random 24-byte nonce)
#
# Sealed layout: nonce(24) ‖ ciphertext ‖ tag(16)
# The nonce doubles as the Argon2 salt, so the key can be re-derived from the
# blob alone. There is no password verification record: a password is only
# ever checked by attempting a real decryption.

from typing import Union

from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw
from Cryptodome.Cipher import ChaCha20_Poly1305
from Cryptodome.Random import get_random_bytes

from .exceptions import (
    CiphertextTooShort,
    InvalidKeyOrCiphertext,
    KeyDerivationError,
    PayloadTooLarge,
)

# ── Constants ────────────────────────────────────────────────────────

NONCE_SIZE = 24             # XChaCha20 extended nonce, also the KDF salt
TAG_SIZE = 16               # Poly1305 tag
KEY_SIZE = 32               # ChaCha20 key
OVERHEAD = NONCE_SIZE + TAG_SIZE
MIN_SALT_SIZE = 8           # Argon2 refuses shorter salts
MAX_PLAINTEXT_LEN = 2 ** 31 - 1

KDF_ITERATIONS = 15
KDF_MEMORY_KIB = 1024
KDF_PARALLELISM = 1


class KeyDerivation:
    """
    Derives symmetric keys from passwords with Argon2i.

    Same password + same salt always gives the same key, which is what lets
    open() re-derive the key from the nonce stored in front of a ciphertext.
    """

    @staticmethod
    def derive_key(password: str, salt: bytes) -> bytes:
        """
        Derive a 256-bit key from password + salt.

        Args:
            password: User's password (must be non-empty)
            salt: Salt bytes, at least MIN_SALT_SIZE long

        Returns:
            32-byte key

        Raises:
            KeyDerivationError: Empty password, short salt, or Argon2 failure
        """
        if not password:
            raise KeyDerivationError("Password error: password is empty")
        if len(salt) < MIN_SALT_SIZE:
            raise KeyDerivationError("Salt is too short")

        try:
            return hash_secret_raw(
                secret=password.encode("utf-8"),
                salt=bytes(salt),
                time_cost=KDF_ITERATIONS,
                memory_cost=KDF_MEMORY_KIB,
                parallelism=KDF_PARALLELISM,
                hash_len=KEY_SIZE,
                type=Type.I,
            )
        except HashingError as e:
            raise KeyDerivationError(f"Could not derive key from password: {e}") from e


def _aead(key: bytes, nonce: bytes):
    """XChaCha20-Poly1305 cipher object for one seal or open (24-byte nonce)."""
    return ChaCha20_Poly1305.new(key=key, nonce=nonce)


class AuthenticatedCipher:
    """
    Seals and opens payloads under a password.

    Flow:
    1. Fresh 24-byte nonce from the OS CSPRNG
    2. Argon2i derives the key from password + nonce
    3. XChaCha20-Poly1305 seals the payload (no associated data)
    4. nonce is prefixed to the sealed bytes

    The output is always OVERHEAD (40) bytes longer than the input and is
    byte-compatible with libsodium's xchacha20poly1305_ietf construction.
    """

    @staticmethod
    def seal(plaintext: Union[bytes, str], password: str) -> bytes:
        """
        Encrypt plaintext with a password.

        Args:
            plaintext: Bytes (or text, encoded as UTF-8) to encrypt
            password: Password to derive the key from

        Returns:
            nonce ‖ ciphertext ‖ tag

        Raises:
            KeyDerivationError: Password unusable
            PayloadTooLarge: Plaintext exceeds MAX_PLAINTEXT_LEN
        """
        if isinstance(plaintext, str):
            plaintext = plaintext.encode("utf-8")

        # Nonce must be unique per encryption
        nonce = get_random_bytes(NONCE_SIZE)
        key = KeyDerivation.derive_key(password, nonce)

        if len(plaintext) > MAX_PLAINTEXT_LEN:
            raise PayloadTooLarge(
                f"Plaintext is too long: {len(plaintext)} bytes (max {MAX_PLAINTEXT_LEN})"
            )

        ciphertext, tag = _aead(key, nonce).encrypt_and_digest(bytes(plaintext))
        return nonce + ciphertext + tag

    @staticmethod
    def open(ciphertext: bytes, password: str) -> bytes:
        """
        Decrypt a blob produced by seal().

        Args:
            ciphertext: nonce ‖ ciphertext ‖ tag
            password: Password used at seal time

        Returns:
            Decrypted plaintext bytes

        Raises:
            CiphertextTooShort: Blob does not extend past the nonce
            InvalidKeyOrCiphertext: Wrong password or tampered data
            KeyDerivationError: Password unusable
        """
        if len(ciphertext) <= NONCE_SIZE:
            raise CiphertextTooShort("Ciphertext is too short")

        nonce = bytes(ciphertext[:NONCE_SIZE])
        body = bytes(ciphertext[NONCE_SIZE:])
        key = KeyDerivation.derive_key(password, nonce)

        # A body shorter than the tag can never authenticate
        if len(body) < TAG_SIZE:
            raise InvalidKeyOrCiphertext("Invalid key password")

        try:
            return _aead(key, nonce).decrypt_and_verify(body[:-TAG_SIZE], body[-TAG_SIZE:])
        except ValueError as e:
            raise InvalidKeyOrCiphertext("Invalid key password") from e
