"""Authorization variants attached to outgoing requests.

An outgoing request carries one of three kinds of authorization:
- NoAuth: no Authorization header at all
- BearerAuth: 'Authorization: Bearer <token>'
- BasicAuth: HTTP basic auth with the given username and an empty password
"""

from dataclasses import dataclass
from typing import Optional, Union

from requests.auth import HTTPBasicAuth

BEARER_PREFIX = "Bearer"


@dataclass(frozen=True)
class NoAuth:
    """No Authorization header is sent."""


@dataclass(frozen=True)
class BearerAuth:
    """Bearer token authorization.

    Attributes:
        token: The raw token, without the 'Bearer ' prefix.
    """

    token: str

    def header_value(self) -> str:
        return f"{BEARER_PREFIX} {self.token}" if self.token else BEARER_PREFIX


@dataclass(frozen=True)
class BasicAuth:
    """HTTP basic authorization with an empty password.

    Attributes:
        username: The username encoded into the basic credentials.
    """

    username: str

    def requests_auth(self) -> HTTPBasicAuth:
        # requests encodes str credentials as latin-1; send UTF-8 instead
        return HTTPBasicAuth(self.username.encode("utf-8"), b"")


Auth = Union[NoAuth, BearerAuth, BasicAuth]


def parse_auth(value: Optional[Union[Auth, str]]) -> Auth:
    """Turn a legacy auth string into an explicit auth variant.

    Only a string starting with 'Bearer ' (or exactly 'Bearer') is treated as a
    bearer credential and sent unchanged. Strings merely containing the word
    elsewhere, e.g. 'NotBearerButContainsBearerWord', are basic-auth usernames.
    Any other string, including the empty string, becomes a basic-auth username.

    Args:
        value: An auth variant, a legacy auth string, or None.

    Returns:
        The matching auth variant. None maps to NoAuth.
    """
    if value is None:
        return NoAuth()
    if isinstance(value, (NoAuth, BearerAuth, BasicAuth)):
        return value
    if value == BEARER_PREFIX:
        return BearerAuth("")
    if value.startswith(BEARER_PREFIX + " "):
        return BearerAuth(value[len(BEARER_PREFIX) + 1:])
    return BasicAuth(value)
