"""JSON decoding of successful responses."""

import logging
import sys
from typing import Any, Dict

import requests

from .http import ReqkitError, RequestExecutionError

logger = logging.getLogger(__name__)


class ResponseDecodeError(ReqkitError, ValueError):
    """Raised when a response body is not a JSON object."""

    def __init__(self, cause: BaseException):
        super().__init__(f"error decoding response JSON: {cause}", cause)


def parse_json(response: requests.Response) -> Dict[str, Any]:
    """Decode the response body as a JSON object and close the response.

    Raises:
        ResponseDecodeError: If the body is not valid JSON or not an object.
        RequestExecutionError: If the body cannot be read.
    """
    try:
        data = response.json()
    except ValueError as exc:
        # requests' JSONDecodeError is also a RequestException, so check it first
        raise ResponseDecodeError(exc) from exc
    except requests.RequestException as exc:
        logger.error("Failed to read response body: %s", exc)
        raise RequestExecutionError(exc) from exc
    finally:
        response.close()

    if not isinstance(data, dict):
        raise ResponseDecodeError(TypeError(f"expected a JSON object, got {type(data).__name__}"))
    return data


def parse_json_or_die(response: requests.Response) -> Dict[str, Any]:
    """Like parse_json, but exits the process on failure.

    Only for callers whose responses are JSON objects by construction.
    """
    try:
        return parse_json(response)
    except ResponseDecodeError as exc:
        logger.critical("err decoding response JSON: '%s'", exc.cause)
        sys.exit(1)
