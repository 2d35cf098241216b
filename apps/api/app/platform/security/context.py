from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class AuthContext:
    """Per-request caller identity handed explicitly to every service call."""

    dealership_id: str
    subject: str | None = None
    correlation_id: str | None = None
