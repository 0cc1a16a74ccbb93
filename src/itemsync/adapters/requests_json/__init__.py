"""``requests.json`` document adapter."""

from __future__ import annotations

from .repository import JsonRequestRepository, JsonUnitOfWork, RequestStoreError
from .schema import RequestPayload
from .translator import format_timestamp, parse_request, parse_timestamp, serialize_request

__all__ = [
    "JsonRequestRepository",
    "JsonUnitOfWork",
    "RequestPayload",
    "RequestStoreError",
    "format_timestamp",
    "parse_request",
    "parse_timestamp",
    "serialize_request",
]
