"""
Custom Exception Classes for Update Blocker

None of these ever reach the host's update flow: the filter catches them at
the hook boundary and degrades to leaving the request alone.
"""

from typing import Any


class UpdateBlockerError(Exception):
    """Base exception class for all update blocker exceptions"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# ============================================================================
# Payload Exceptions
# ============================================================================


class MalformedPayload(UpdateBlockerError):
    """Raised when a request body cannot be decoded, filtered or encoded"""

    def __init__(self, message: str = "Malformed update payload", serialization: str | None = None):
        details = {"serialization": serialization} if serialization else {}
        super().__init__(message=message, details=details)


# ============================================================================
# Filesystem Exceptions
# ============================================================================


class FilesystemProbeFailure(UpdateBlockerError):
    """Raised when a marker file existence check cannot access the filesystem"""

    def __init__(self, path: str, reason: str):
        super().__init__(
            message=f"Cannot probe '{path}': {reason}",
            details={"path": path, "reason": reason},
        )


# ============================================================================
# Lifecycle & Configuration Exceptions
# ============================================================================


class InvalidStateTransitionError(UpdateBlockerError):
    """Raised when the filter lifecycle is driven out of order"""

    def __init__(self, current_state: str, target_state: str):
        super().__init__(
            message=f"Cannot transition update filter from '{current_state}' to '{target_state}'",
            details={"current_state": current_state, "target_state": target_state},
        )


class ConfigurationError(UpdateBlockerError):
    """Raised when a transformed configuration fails validation"""

    def __init__(self, message: str = "Invalid update blocker configuration", errors: list[Any] | None = None):
        super().__init__(message=message, details={"errors": errors or []})
