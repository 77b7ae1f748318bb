import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest
from aiohttp import web
from aiohttp import test_utils

from workflow_engine.errors import ConfigurationError, ExternalCallError
from workflow_engine.node_system import NodeExternalCall


async def echo(request):
    body = await request.json() if request.can_read_body else None
    return web.json_response({
        "method": request.method,
        "body": body,
        "contentType": request.headers.get("Content-Type"),
        "token": request.headers.get("X-Token"),
    })


async def missing(request):
    return web.json_response({"error": "not found"}, status=404)


async def plain_text(request):
    return web.Response(text="definitely not json")


def make_app():
    app = web.Application()
    app.router.add_route("*", "/echo", echo)
    app.router.add_get("/missing", missing)
    app.router.add_get("/text", plain_text)
    return app


class TestExternalCallNode:

    def setup_method(self):
        self.node = NodeExternalCall(node_id="api", node_type="external-call", request_timeout=5)

    @pytest.mark.asyncio
    async def test_get_returns_status_and_data(self):
        async with test_utils.TestServer(make_app()) as server:
            result = await self.node({"default": 3}, {"url": str(server.make_url("/echo"))})

        assert result["status"] == 200
        assert result["data"]["method"] == "GET"
        assert result["data"]["body"] is None
        assert result["data"]["contentType"] == "application/json"
        assert result["input"] == 3

    @pytest.mark.asyncio
    async def test_post_substitutes_input_token(self):
        config = {
            "method": "post",
            "headers": {"X-Token": "secret"},
            "body": '{"payload": {{input}}}',
        }
        async with test_utils.TestServer(make_app()) as server:
            config["endpoint"] = str(server.make_url("/echo"))
            result = await self.node({"default": {"n": 1}}, config)

        assert result["data"]["method"] == "POST"
        assert result["data"]["body"] == {"payload": {"n": 1}}
        assert result["data"]["token"] == "secret"

    @pytest.mark.asyncio
    async def test_error_status_is_returned(self):
        async with test_utils.TestServer(make_app()) as server:
            result = await self.node({}, {"url": str(server.make_url("/missing"))})
        assert result["status"] == 404
        assert result["data"] == {"error": "not found"}

    @pytest.mark.asyncio
    async def test_non_json_response_raises(self):
        async with test_utils.TestServer(make_app()) as server:
            with pytest.raises(ExternalCallError) as exc_info:
                await self.node({}, {"url": str(server.make_url("/text"))})
        assert exc_info.value.node_id == "api"

    @pytest.mark.asyncio
    async def test_unreachable_host_raises(self):
        async with test_utils.TestServer(make_app()) as server:
            url = str(server.make_url("/echo"))
        # Server is closed now
        with pytest.raises(ExternalCallError):
            await self.node({}, {"url": url})

    @pytest.mark.asyncio
    async def test_missing_url(self):
        with pytest.raises(ConfigurationError):
            await self.node({}, {"method": "GET"})

    @pytest.mark.asyncio
    async def test_invalid_method(self):
        with pytest.raises(ConfigurationError):
            await self.node({}, {"url": "http://localhost", "method": "TELEPORT"})

    def test_header_merge(self):
        headers = self.node.build_headers('{"Content-Type": "text/plain", "A": "1"}')
        assert headers == {"Content-Type": "text/plain", "A": "1"}
        assert self.node.build_headers(None) == {"Content-Type": "application/json"}

    def test_body_without_token(self):
        assert self.node.build_body({"a": 1}, "ignored") == {"a": 1}
        assert self.node.build_body("plain", None) == "plain"
        assert self.node.build_body("", None) is None

    def test_structured_body_with_string_input(self):
        body = {"name": "{{input}}", "greeting": "hello {{input}}", "tags": ["{{input}}", 1]}
        assert self.node.build_body(body, "alice") == {
            "name": "alice",
            "greeting": "hello alice",
            "tags": ["alice", 1],
        }

    def test_structured_body_keeps_raw_input(self):
        assert self.node.build_body({"payload": "{{input}}"}, {"n": [1, 2]}) == {"payload": {"n": [1, 2]}}
        assert self.node.build_body(["{{input}}"], None) == [None]

    @pytest.mark.asyncio
    async def test_post_structured_body_with_string_input(self):
        async with test_utils.TestServer(make_app()) as server:
            result = await self.node({"default": "alice"}, {
                "url": str(server.make_url("/echo")),
                "method": "POST",
                "body": {"name": "{{input}}"},
            })
        assert result["status"] == 200
        assert result["data"]["body"] == {"name": "alice"}
