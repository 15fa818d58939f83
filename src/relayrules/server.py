"""aiohttp.web transport for the rules service.

Handlers only decode requests and encode results; all rule logic lives in
:class:`relayrules.service.RulesService`. Service calls do blocking file
I/O and are run in a worker thread.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from http import HTTPStatus

from aiohttp import web

from relayrules.exceptions import RelayNotFoundError, RelayRulesError, RequestDecodeError
from relayrules.models.requests import RelayPatch
from relayrules.service import RulesService

_logger = logging.getLogger(__name__)

SERVICE_KEY = web.AppKey("service", RulesService)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def _message(status: HTTPStatus | int, message: str | None = None) -> web.Response:
    status = HTTPStatus(status)
    return web.json_response({"message": message or status.phrase}, status=status.value)


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Map library errors onto JSON error responses."""
    try:
        return await handler(request)
    except RelayNotFoundError as exc:
        _logger.info("%s %s: relay %s/%s not found", request.method, request.path, exc.pin, exc.designator)
        return _message(HTTPStatus.NOT_FOUND, str(exc))
    except RelayRulesError as exc:
        _logger.error("%s %s failed: %s", request.method, request.path, exc)
        return _message(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))


async def health(_request: web.Request) -> web.Response:
    return _message(HTTPStatus.OK)


async def rules(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    rule_set = await asyncio.to_thread(service.get_rules)
    return web.json_response(rule_set.to_wire())


async def sensors(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    status = await asyncio.to_thread(service.get_status)
    return web.json_response(status.to_wire())


async def relays(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    raw = await request.read()
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise RequestDecodeError(f"request body is not valid JSON: {exc}") from exc
    patch = RelayPatch.from_wire(body)
    await asyncio.to_thread(service.patch_relay, patch)
    return web.Response(status=HTTPStatus.NO_CONTENT.value)


def create_app(service: RulesService) -> web.Application:
    """Build the HTTP application around *service*."""
    app = web.Application(middlewares=[error_middleware])
    app[SERVICE_KEY] = service
    app.router.add_get("/health", health)
    app.router.add_get("/rules", rules)
    app.router.add_get("/sensors", sensors)
    app.router.add_patch("/relays", relays)
    return app
