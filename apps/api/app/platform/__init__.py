from app.platform.security.access import AccessValidator, ScopedAccess
from app.platform.security.context import AuthContext
from app.platform.security.errors import AuthorizationError, DealershipAccessDeniedError
from app.platform.security.hierarchy import HierarchyResolver

__all__ = [
    "AccessValidator",
    "AuthContext",
    "AuthorizationError",
    "DealershipAccessDeniedError",
    "HierarchyResolver",
    "ScopedAccess",
]
