"""Send a single request from the command line.

    python -m reqkit POST https://example.test/items --data '{"key": "value"}'
"""

import argparse
import json
import logging
import sys
from typing import Dict, List, Optional

import yaml
from dotenv import load_dotenv

from .clients.decode import ResponseDecodeError, parse_json
from .clients.http import JSON_CONTENT_TYPE, HttpClient, HttpError, HttpRequest, ReqkitError, body_text
from .config.config import ConfigurationError, load_config, configure_logging

log = logging.getLogger("reqkit")


def _parse_form(pairs: List[str]) -> Dict[str, List[str]]:
    form: Dict[str, List[str]] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise argparse.ArgumentTypeError(f"form field must be KEY=VALUE, got {pair!r}")
        form.setdefault(key, []).append(value)
    return form


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="reqkit", description="Send one HTTP request.")
    parser.add_argument("verb")
    parser.add_argument("endpoint")
    parser.add_argument("--auth", help="'Bearer <token>' or a basic-auth username")
    parser.add_argument("--data", help="raw request body")
    parser.add_argument("--form", action="append", default=[], metavar="KEY=VALUE")
    parser.add_argument("--content-type", default=JSON_CONTENT_TYPE)
    parser.add_argument("--config", help="YAML client configuration")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = load_config(args.config)
    except (ConfigurationError, OSError, yaml.YAMLError) as e:
        print(f"invalid configuration: {e}", file=sys.stderr)
        return 2
    configure_logging(cfg.log_level)

    try:
        form = _parse_form(args.form)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    request = HttpRequest(
        verb=args.verb,
        endpoint=args.endpoint,
        auth=args.auth,
        body=args.data.encode("utf-8") if args.data is not None else None,
        form=form or None,
        content_type=args.content_type,
    )

    client = HttpClient.from_config(cfg)
    try:
        response = client.send(request)
    except HttpError as e:
        print(e.message, file=sys.stderr)
        return 1
    except ReqkitError as e:
        log.error("%s", e)
        return 2

    # parse_json closes the response, so keep the text for the non-JSON case
    text = body_text(response)
    try:
        print(json.dumps(parse_json(response), indent=2))
    except ResponseDecodeError:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
