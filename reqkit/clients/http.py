"""Request descriptor, request builder and executor.

A caller describes one request with HttpRequest and hands it to send() (or
HttpClient.send()). Responses with a 2xx status are returned unread; anything
else is drained, closed and raised as HttpError.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Union
from urllib.parse import urlencode

import requests

from .auth import Auth, BasicAuth, BearerAuth, parse_auth
from .transport import SharedSession, build_session, get_shared_session

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"

FormFields = Mapping[str, Union[str, Sequence[str]]]


class ReqkitError(Exception):
    """Base class for every error raised by reqkit.

    Attributes:
        cause: The underlying exception, if any. Also available as __cause__.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class RequestBuildError(ReqkitError):
    """Raised when the request cannot be prepared (e.g. malformed URL)."""

    def __init__(self, cause: BaseException):
        super().__init__(f"error creating http request: {cause}", cause)


class RequestExecutionError(ReqkitError):
    """Raised on transport-level failures (DNS, connection refused, ...)."""

    def __init__(self, cause: BaseException):
        super().__init__(f"error executing http request: {cause}", cause)


class HttpError(ReqkitError):
    """Raised when a response status falls outside [200, 300).

    Attributes:
        status_code: The response status code.
        message: '[REQUEST.FAIL]-'<status line>'-'<body>''.
        raw_body: The full response body text.
    """

    def __init__(self, status_code: int, message: str, raw_body: str):
        super().__init__(f"{message} - {raw_body}")
        self.status_code = status_code
        self.message = message
        self.raw_body = raw_body


@dataclass(frozen=True)
class HttpRequest:
    """Describes a single HTTP request.

    Attributes:
        verb: HTTP method, passed through as given.
        endpoint: Fully qualified target URL.
        auth: An auth variant, a legacy auth string (see parse_auth) or None.
        body: Raw payload, sent when content_type is not form-urlencoded.
        form: Form fields, sent only when content_type is form-urlencoded.
        content_type: Value of the Content-Type header; selects the body branch.
    """

    verb: str
    endpoint: str
    auth: Optional[Union[Auth, str]] = None
    body: Optional[bytes] = None
    form: Optional[FormFields] = None
    content_type: str = JSON_CONTENT_TYPE

    def do(self) -> requests.Response:
        return send(self)


def encode_form(form: Optional[FormFields]) -> bytes:
    """Encode form fields as key=value&..., ordered by key."""
    if not form:
        return b""
    return urlencode(sorted(form.items()), doseq=True).encode("utf-8")


def build_request(request: HttpRequest, session: requests.Session) -> requests.PreparedRequest:
    """Turn a descriptor into a prepared request bound to the session's defaults.

    Raises:
        RequestBuildError: If requests refuses to prepare the request.
    """
    if request.content_type == FORM_CONTENT_TYPE:
        data = encode_form(request.form)
    else:
        data = request.body

    headers = {}
    if request.content_type:
        headers["Content-Type"] = request.content_type

    auth = parse_auth(request.auth)
    basic = None
    if isinstance(auth, BearerAuth):
        headers["Authorization"] = auth.header_value()
    elif isinstance(auth, BasicAuth):
        basic = auth.requests_auth()

    try:
        prepared = session.prepare_request(
            requests.Request(
                method=request.verb,
                url=request.endpoint,
                headers=headers,
                data=data,
                auth=basic,
            )
        )
    except (requests.RequestException, ValueError) as exc:
        logger.error("Could not build %s request for %s: %s", request.verb, request.endpoint, exc)
        raise RequestBuildError(exc) from exc

    # prepare_request upper-cases the method; send it as given
    prepared.method = request.verb
    return prepared


def status_line(response: requests.Response) -> str:
    if response.reason:
        return f"{response.status_code} {response.reason}"
    return str(response.status_code)


def body_text(response: requests.Response) -> str:
    """Read the whole body and decode it with the declared charset, else UTF-8.

    Unlike response.text, a text/* body without a charset is not read as ISO-8859-1.
    """
    content = response.content
    charset = None
    for param in response.headers.get("Content-Type", "").split(";")[1:]:
        key, _, value = param.strip().partition("=")
        if key.lower() == "charset" and value:
            charset = value.strip("'\"")
    try:
        return content.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return content.decode("utf-8", errors="replace")


def check_status(response: requests.Response) -> requests.Response:
    """Return 2xx responses untouched; drain, close and raise for the rest.

    Raises:
        HttpError: If the status code is outside [200, 300).
        RequestExecutionError: If the error body cannot be read.
    """
    if 200 <= response.status_code < 300:
        return response

    try:
        body = body_text(response)
    except requests.RequestException as exc:
        logger.error("Failed to read error response body: %s", exc)
        raise RequestExecutionError(exc) from exc
    finally:
        response.close()

    method = response.request.method if response.request is not None else "?"
    logger.error(
        "Request failed: %s %s returned %d: %s",
        method,
        response.url,
        response.status_code,
        body,
    )
    logger.debug("Failed response %r headers: %s", response, dict(response.headers))

    raise HttpError(
        status_code=response.status_code,
        message=f"[REQUEST.FAIL]-'{status_line(response)}'-'{body}'",
        raw_body=body,
    )


class HttpClient:
    """Sends HttpRequest descriptors through one long-lived session.

    Pass a session explicitly to control its lifetime; otherwise the
    process-wide shared session is used (or the given SharedSession holder).
    """

    def __init__(self, session: Optional[requests.Session] = None, shared: Optional[SharedSession] = None):
        self._session = session
        self._shared = shared

    @classmethod
    def from_config(cls, config) -> "HttpClient":
        """Create a client with a dedicated session built from a ClientConfig."""
        return cls(session=build_session(headers=config.headers, user_agent=config.user_agent))

    @property
    def session(self) -> requests.Session:
        if self._session is not None:
            return self._session
        if self._shared is not None:
            return self._shared.get()
        return get_shared_session()

    def send(self, request: HttpRequest) -> requests.Response:
        """Send the request and classify the response status.

        The returned response body is unread; the caller must close it
        (parse_json does so).

        Raises:
            RequestBuildError: If the request cannot be built.
            RequestExecutionError: On transport-level failures.
            HttpError: If the response status is outside [200, 300).
        """
        session = self.session
        prepared = build_request(request, session)
        settings = session.merge_environment_settings(prepared.url, {}, True, None, None)

        logger.debug("Making %s request to %s", prepared.method, prepared.url)

        try:
            response = session.send(prepared, **settings)
        except requests.RequestException as exc:
            logger.error("Request %s %s failed: %s", prepared.method, prepared.url, exc)
            raise RequestExecutionError(exc) from exc

        return check_status(response)


def send(request: HttpRequest) -> requests.Response:
    """Send the request through the process-wide shared session."""
    return HttpClient().send(request)
