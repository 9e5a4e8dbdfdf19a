"""Exception types raised while resolving a VM configuration.

Every check runs before any decision is emitted, so any of these errors means
nothing was produced for the invocation.

Exception Hierarchy:
    ResolverError (base)
    ├── InvalidCombination - mutually exclusive or incompatible fields both set
    ├── UnsupportedCombination - feature requested where the shape can't carry it
    └── MissingRequiredField - required input absent
"""

from typing import Any


class ResolverError(Exception):
    """Base exception for resolution failures.

    Attributes:
        message: Human-readable error description
        context: Additional information (field names, disk names, indices)
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class InvalidCombination(ResolverError):
    """Raised when fields that exclude each other are set together.

    Examples:
        - both a raw disk key and a KMS key link
        - confidential compute with on_host_maintenance = MIGRATE
        - service account email together with auto_create
    """


class UnsupportedCombination(ResolverError):
    """Raised when a feature is requested for a shape that does not support it.

    Examples:
        - snapshot-sourced disks in an instance template
        - static address reservations in an instance template
    """


class MissingRequiredField(ResolverError):
    """Raised when a required input field is absent."""

    def __init__(self, field: str, context: dict[str, Any] | None = None):
        super().__init__(f"Missing required field: {field}", context)
        self.field = field
