# Core Module - Shared Utilities
#
# Core module provides shared functionality for the vault:
# - Configuration
# - Audit logging
# - JSON dictionary store
# - Environment / database lifecycle

from .audit_log import (
    AuditLogger,
    EventSeverity,
    EventType,
    configure_audit_logger,
    get_audit_logger,
    log_vault_event,
)
from .config import VaultConfig
from .environment import VaultEnvironment
from .store import DictStore

__all__ = [
    # Configuration
    "VaultConfig",
    # Audit Logging
    "AuditLogger",
    "EventType",
    "EventSeverity",
    "configure_audit_logger",
    "get_audit_logger",
    "log_vault_event",
    # Storage
    "DictStore",
    "VaultEnvironment",
]
