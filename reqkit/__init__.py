"""Minimal HTTP request helper built on a shared requests.Session."""

from .clients.auth import BasicAuth, BearerAuth, NoAuth, parse_auth
from .clients.decode import ResponseDecodeError, parse_json, parse_json_or_die
from .clients.http import (
    FORM_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    HttpClient,
    HttpError,
    HttpRequest,
    ReqkitError,
    RequestBuildError,
    RequestExecutionError,
    send,
)
from .clients.transport import SharedSession, get_shared_session

__all__ = [
    "BasicAuth",
    "BearerAuth",
    "NoAuth",
    "parse_auth",
    "ResponseDecodeError",
    "parse_json",
    "parse_json_or_die",
    "FORM_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
    "HttpClient",
    "HttpError",
    "HttpRequest",
    "ReqkitError",
    "RequestBuildError",
    "RequestExecutionError",
    "send",
    "SharedSession",
    "get_shared_session",
]
