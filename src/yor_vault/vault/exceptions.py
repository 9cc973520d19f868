"""
Vault Exception Classes
"""


class VaultException(Exception):
    """Base exception for vault operations"""
    pass


class KeyDerivationError(VaultException):
    """Raised when a key cannot be derived from the password and salt"""
    pass


class PayloadTooLarge(VaultException):
    """Raised when a plaintext is too long to be sealed"""
    pass


class CipherError(VaultException):
    """Base for failures to open a sealed payload"""
    pass


class CiphertextTooShort(CipherError):
    """Raised when a ciphertext cannot even hold its nonce"""
    pass


class InvalidKeyOrCiphertext(CipherError):
    """Raised when authentication fails (wrong password or corrupted data)"""
    pass


class PasswordAttemptsExhausted(VaultException):
    """Raised after the last allowed password attempt fails"""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Password rejected {attempts} times. Are you sure the password is correct?"
        )


class UnsupportedCategory(VaultException):
    """Raised when a category kind is not one of data, image, video, file"""
    pass


class MissingDatabase(VaultException):
    """Raised when a database has not been created yet"""
    pass


class DatabaseExists(VaultException):
    """Raised when creating a database that already exists"""
    pass


class MissingKey(VaultException):
    """Raised when a key is not present in the database"""
    pass


class PasswordMismatch(VaultException):
    """Raised when the password confirmation does not match"""
    pass


class EnvironmentNotFound(VaultException):
    """Raised when clearing an environment directory that does not exist"""
    pass


class CorruptRecord(VaultException):
    """Raised when a database file or stored record cannot be decoded"""
    pass


class UnsafeFileName(VaultException):
    """Raised when a key cannot be used as the name of a retrieved file"""
    pass
