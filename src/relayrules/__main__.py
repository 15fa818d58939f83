"""Command-line entry point: serve the rules API over HTTP."""

from __future__ import annotations

import argparse
import logging
import sys

from aiohttp import web

from relayrules.config import RulesConfig
from relayrules.exceptions import ConfigError
from relayrules.server import create_app
from relayrules.service import RulesService
from relayrules.store import JsonFileRuleStore


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve heating circuit relay rules over HTTP")
    parser.add_argument("--rules", help="Path to the rules JSON file (env: RELAYRULES_RULES_PATH)")
    parser.add_argument("--host", help="Interface to bind (env: RELAYRULES_HOST)")
    parser.add_argument("--port", type=int, help="Port to listen on (env: RELAYRULES_PORT)")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, object] = {}
    if args.rules:
        overrides["rules_path"] = args.rules
    if args.host:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    try:
        config = RulesConfig.from_env(**overrides)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    service = RulesService(JsonFileRuleStore(config.rules_path), utc_offset=config.tz)
    logging.getLogger(__name__).info("Serving rules from %s", config.rules_path)
    web.run_app(create_app(service), host=config.host, port=config.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
