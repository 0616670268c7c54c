"""Process-wide shared requests.Session.

The session is created lazily on first use and reused by every request,
regardless of target host. It is left with requests' defaults: no client-side
timeout and the default connection pool.
"""

import logging
import threading
from typing import Callable, Dict, Optional

import requests

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], requests.Session]


def build_session(headers: Optional[Dict[str, str]] = None, user_agent: Optional[str] = None) -> requests.Session:
    """Create a session carrying the given default headers.

    Args:
        headers: Optional headers applied to every request sent through the session.
        user_agent: Optional User-Agent overriding the requests default.

    Returns:
        A new requests.Session.
    """
    session = requests.Session()
    session.headers.update(headers or {})
    if user_agent:
        session.headers["User-Agent"] = user_agent
    return session


class SharedSession:
    """Holds a single session, built at most once.

    Attributes:
        factory: Callable returning a new requests.Session. Called exactly once,
            even when several threads ask for the session concurrently before it exists.
    """

    def __init__(self, factory: SessionFactory = build_session):
        self.factory = factory
        self._session: Optional[requests.Session] = None
        self._lock = threading.Lock()

    def get(self) -> requests.Session:
        """Return the shared session, creating it on first call.

        Uses double-check locking so the common path takes no lock.
        """
        session = self._session
        if session is not None:
            return session

        with self._lock:
            if self._session is None:
                logger.debug("Creating shared HTTP session")
                self._session = self.factory()
            return self._session


_shared = SharedSession()


def get_shared_session() -> requests.Session:
    return _shared.get()
