from app.platform.security.access import AccessValidator, ScopedAccess, scoped_access
from app.platform.security.context import AuthContext
from app.platform.security.errors import AuthorizationError, DealershipAccessDeniedError
from app.platform.security.hierarchy import HierarchyResolver
from app.platform.security.repository import DealershipScopedRepository

__all__ = [
    "AccessValidator",
    "AuthContext",
    "AuthorizationError",
    "DealershipAccessDeniedError",
    "DealershipScopedRepository",
    "HierarchyResolver",
    "ScopedAccess",
    "scoped_access",
]
