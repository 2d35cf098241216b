from __future__ import annotations

import re

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.requests import Request


http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)

dealership_access_decisions_total = Counter(
    "dealership_access_decisions_total",
    "Dealership access decisions by resource, action and outcome",
    ["resource", "action", "decision"],
)

dealership_hierarchy_walk_depth = Histogram(
    "dealership_hierarchy_walk_depth",
    "Parent links followed per ancestor walk (ancestry checks and dealership paths)",
    buckets=(0, 1, 2, 3, 5, 8, 13, 21, 50, 100),
)

dealership_hierarchy_anomalies_total = Counter(
    "dealership_hierarchy_anomalies_total",
    "Ancestor walks cut short by a cycle or the depth bound",
    ["reason"],
)


_UUID_RE = re.compile(
    r"\b[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[1-5][0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}\b"
)
_PATH_PARAM_RE = re.compile(r"\{[^{}]+\}")


def _sanitize_path(path: str) -> str:
    return _UUID_RE.sub("{id}", path)


def resolve_http_path_label(request: Request) -> str:
    route = request.scope.get("route")
    if route is not None:
        route_path = getattr(route, "path_format", None) or getattr(route, "path", None)
        if isinstance(route_path, str) and route_path:
            return _PATH_PARAM_RE.sub("{id}", route_path)
    return _sanitize_path(request.url.path)


def observe_http_request(method: str, path: str, status: int, duration: float) -> None:
    http_requests_total.labels(method=method, path=path, status=str(status)).inc()
    http_request_duration_seconds.labels(method=method, path=path).observe(duration)


def observe_access_decision(resource: str, action: str, allowed: bool) -> None:
    decision = "allow" if allowed else "deny"
    dealership_access_decisions_total.labels(resource=resource, action=action, decision=decision).inc()


def observe_hierarchy_walk(depth: int) -> None:
    dealership_hierarchy_walk_depth.observe(depth)


def observe_hierarchy_anomaly(reason: str) -> None:
    dealership_hierarchy_anomalies_total.labels(reason=reason).inc()


def generate_metrics_payload() -> bytes:
    return generate_latest()


def metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
