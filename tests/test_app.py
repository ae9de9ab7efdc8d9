"""Tests for the Site application object and the ASGI handler."""

import pytest

from docsite.app import Site
from docsite.config import SiteConfig
from docsite.errors import NotFound
from docsite.http.response import Redirect, Response
from docsite.testing import TestClient, assert_redirect


def _site(path, handler, *, config=None, methods=None):
    site = Site(config)
    site.add_route(path, handler, methods=methods)
    return site


class TestRegistration:
    def test_cannot_modify_after_compile(self) -> None:
        async def index(request):
            return Response("home")

        site = _site("/", index)
        assert [route.path for route in site.routes] == ["/"]
        with pytest.raises(RuntimeError, match="Cannot modify"):
            site.add_route("/late", index)
        with pytest.raises(RuntimeError):
            site.add_middleware(lambda request, next: next(request))

    def test_default_methods(self) -> None:
        site = _site("/", Response)
        assert site.routes[0].methods == frozenset({"GET", "HEAD"})

    def test_compiles_once(self) -> None:
        site = _site("/", Response)
        assert site.compile() is site.compile()


class TestLifecycle:
    async def test_client_runs_shutdown_hooks(self) -> None:
        site = _site("/", Response)
        events = []

        async def shutdown():
            events.append("shutdown")

        site.on_shutdown(shutdown)
        async with TestClient(site):
            assert events == []
        assert events == ["shutdown"]

    async def test_lifespan_protocol(self) -> None:
        site = _site("/", Response)
        stopped = []

        async def shutdown():
            stopped.append(True)

        site.on_shutdown(shutdown)
        messages = iter([{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}])
        sent = []

        async def receive():
            return next(messages)

        async def send(message):
            sent.append(message["type"])

        await site({"type": "lifespan"}, receive, send)
        assert stopped == [True]
        assert sent == ["lifespan.startup.complete", "lifespan.shutdown.complete"]

    async def test_failed_compile_is_reported(self) -> None:
        site = _site("/{x:uuid}", Response)
        sent = []

        async def receive():
            return {"type": "lifespan.startup"}

        async def send(message):
            sent.append(message)

        await site({"type": "lifespan"}, receive, send)
        assert sent == [
            {
                "type": "lifespan.startup.failed",
                "message": "Unknown path converter 'uuid' in route '/{x:uuid}'",
            }
        ]


class TestDispatch:
    async def test_middleware_order(self) -> None:
        order = []

        def tagging(name):
            async def middleware(request, next):
                order.append(name)
                response = await next(request)
                return response.with_header("X-Seen", name)

            return middleware

        async def index(request):
            order.append("handler")
            return Response("ok")

        site = _site("/", index)
        site.add_middleware(tagging("outer"))
        site.add_middleware(tagging("inner"))

        async with TestClient(site) as client:
            response = await client.get("/")
        assert order == ["outer", "inner", "handler"]
        assert [v for k, v in response.headers if k == "x-seen"] == ["inner", "outer"]

    async def test_redirect_return_value(self) -> None:
        async def index(request):
            return Redirect("/en/")

        async with TestClient(_site("/", index)) as client:
            assert_redirect(await client.get("/"), "/en/")

    async def test_not_found_and_method_not_allowed(self) -> None:
        async def only_post(request):
            return Response("posted")

        async with TestClient(_site("/only-post", only_post, methods=["POST"])) as client:
            missing = await client.get("/nope")
            wrong = await client.get("/only-post")
        assert missing.status == 404
        assert missing.content_type.startswith("text/plain")
        assert wrong.status == 405
        assert wrong.header("Allow") == "POST"

    async def test_http_error_detail_prefixed_in_debug(self) -> None:
        async def index(request):
            raise NotFound("no such page")

        async with TestClient(_site("/", index)) as client:
            response = await client.get("/")
        assert response.text == "404: no such page"

    async def test_unexpected_error_in_production_is_plain(self) -> None:
        async def index(request):
            raise RuntimeError("handler bug")

        site = _site("/", index, config=SiteConfig(production=True))
        async with TestClient(site) as client:
            response = await client.get("/")
        assert response.status == 500
        assert response.text == "Internal Server Error"

    async def test_unexpected_error_in_development_shows_debug_page(self) -> None:
        async def index(request):
            raise RuntimeError("handler bug")

        async with TestClient(_site("/", index)) as client:
            response = await client.get("/")
        assert response.status == 500
        assert "<h1>RuntimeError</h1>" in response.text

    async def test_path_params_reach_handler(self) -> None:
        async def page(request):
            return Response(f"{request.path_params['lang']}|{request.path_params['rest']}")

        async with TestClient(_site("/{lang:lang}/{rest:path}", page)) as client:
            response = await client.get("/fr/a/b")
        assert response.text == "fr|a/b"
