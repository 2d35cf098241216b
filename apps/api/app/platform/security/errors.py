from __future__ import annotations


class AuthorizationError(Exception):
    """Base authorization error for dealership scope enforcement failures."""


class DealershipAccessDeniedError(AuthorizationError):
    """Raised when a caller targets a dealership outside its own subtree."""

    def __init__(self, caller_dealership_id: str, target_dealership_id: str) -> None:
        self.caller_dealership_id = caller_dealership_id
        self.target_dealership_id = target_dealership_id
        super().__init__(
            f"Dealership '{caller_dealership_id}' may not access dealership '{target_dealership_id}'"
        )
