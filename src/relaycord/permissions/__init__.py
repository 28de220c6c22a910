"""Permission and staff hierarchy checks."""

from relaycord.permissions.permission_resolver import PermissionResolver, validate_capabilities

__all__ = ["PermissionResolver", "validate_capabilities"]
