"""
Exceptions raised by the RBAC provisioning layer.
Authorization denials are ordinary results and never raise.
"""


class RbacError(Exception):
    """Base exception for the RBAC module."""

    def __init__(self, message="RBAC operation failed"):
        self.message = message
        super().__init__(self.message)


class CatalogReferenceError(RbacError):
    """
    Raised when the role catalog references permissions that the permission
    catalog does not define, or when role names are duplicated.
    """

    def __init__(self, message, unresolved=None, duplicates=None):
        self.unresolved = unresolved or {}
        self.duplicates = duplicates or []
        super().__init__(message)


class PersistenceError(RbacError):
    """Raised when a database read or write fails during reconciliation."""
    pass
