# Yor - Main Package
#
# Secure personal key-value storage: named databases of plain text,
# password-encrypted values and password-encrypted files.

__version__ = "0.3.0"
__author__ = "Yor Team"
__description__ = "Secure personal key-value storage vault"

from .core import (
    EventSeverity,
    EventType,
    VaultConfig,
    VaultEnvironment,
    get_audit_logger,
)
from .vault import VaultItemEngine

__all__ = [
    "__version__",
    "VaultConfig",
    "VaultEnvironment",
    "VaultItemEngine",
    "EventType",
    "EventSeverity",
    "get_audit_logger",
]
