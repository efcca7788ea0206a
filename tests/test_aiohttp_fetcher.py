"""End-to-end liveness checks against a local aiohttp server."""

from __future__ import annotations

import asyncio

from aiohttp import web

from linkresolver.engine.config import LivenessOptions
from linkresolver.engine.liveness import TIMEOUT, AiohttpFetcher, batch_check_urls


def build_app() -> web.Application:
    async def ok(request: web.Request) -> web.Response:
        return web.Response(text="ok")

    async def missing(request: web.Request) -> web.Response:
        return web.Response(status=404)

    async def get_only(request: web.Request) -> web.Response:
        if request.method == "HEAD":
            return web.Response(status=405)
        return web.Response(text="get")

    async def moved(request: web.Request) -> web.Response:
        raise web.HTTPFound("/ok")

    async def slow(request: web.Request) -> web.Response:
        await asyncio.sleep(1.5)
        return web.Response(text="late")

    app = web.Application()
    app.router.add_route("*", "/ok", ok)
    app.router.add_route("*", "/missing", missing)
    app.router.add_route("*", "/get-only", get_only)
    app.router.add_route("*", "/moved", moved)
    app.router.add_route("*", "/slow", slow)
    return app


async def check_against_local_server():
    runner = web.AppRunner(build_app())
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    try:
        host, port = runner.addresses[0][:2]
        base = f"http://{host}:{port}"
        urls = [f"{base}{path}" for path in ("/ok", "/missing", "/get-only", "/moved", "/slow")]
        async with AiohttpFetcher() as fetcher:
            return await batch_check_urls(urls, LivenessOptions(timeout_ms=300, retries=0), fetcher)
    finally:
        await runner.cleanup()


def test_probes_real_http_responses():
    results = asyncio.run(check_against_local_server())

    ok, missing, get_only, moved, slow = results
    assert ok.is_live and ok.status_code == 200 and ok.method == "HEAD"
    assert not missing.is_live and missing.status_code == 404
    assert get_only.is_live and get_only.method == "GET"
    assert moved.is_live and moved.status_code == 200
    assert not slow.is_live and slow.error_kind == TIMEOUT


def test_fetcher_leaves_injected_session_open():
    async def scenario():
        import aiohttp

        async with aiohttp.ClientSession() as session:
            async with AiohttpFetcher(session) as fetcher:
                assert fetcher is not None
            return session.closed

    assert asyncio.run(scenario()) is False
