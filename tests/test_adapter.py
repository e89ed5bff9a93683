"""Tests for CliAdapter: list mode, dispatch mode, env, hooks and variants."""

from __future__ import annotations

import json

import httpx
import pytest
from fastapi import FastAPI

from cli_adapter import (
    AdapterOptions,
    adapt_and_fetch,
    create_adapter,
    run_cli,
    run_cli_default,
)
from cli_adapter.engine.adapter import GET_VARIANT, POST_VARIANT, format_output
from cli_adapter.handlers import Handler

CMD = AdapterOptions(command_base="cmd")


class TestListMode:
    async def test_post_routes_as_examples(self, example_app):
        result = await run_cli_default(example_app, ["--list"], CMD)
        assert result.code == 0
        assert result.lines == ["cmd", "cmd help", "cmd hello <name>", "cmd env <key>", "cmd submit"]
        assert result.request is None and result.response is None

    async def test_get_variant_lists_get_routes(self, get_app):
        result = await run_cli(get_app, ["--list", "ignored", "--json"], CMD)
        assert result.code == 0
        assert result.lines == ["cmd items <item_id>", "cmd env <key>", "cmd missing"]

    async def test_list_does_not_dispatch(self, static_handler):
        handler = static_handler(routes=[{"method": "POST", "path": "/ping"}])
        result = await run_cli_default(handler, ["ping", "--list"], CMD)
        assert result.lines == ["cmd ping"]
        assert handler.requests == []

    async def test_repeated_list_flag_still_lists(self, static_handler):
        handler = static_handler(routes=[{"method": "POST", "path": "/ping"}])
        result = await run_cli_default(handler, ["--list", "--list"], CMD)
        assert result.lines == ["cmd ping"]
        assert handler.requests == []

    async def test_list_flag_with_explicit_true(self, static_handler):
        handler = static_handler(routes=[{"method": "POST", "path": "/ping"}])
        result = await run_cli_default(handler, ["--list=true"], CMD)
        assert result.lines == ["cmd ping"]
        assert handler.requests == []

    async def test_fastapi_openapi_used_without_explicit_document(self):
        app = FastAPI()

        @app.post("/user/{user_id}")
        async def create(user_id: str, email: str) -> dict:
            return {}

        result = await run_cli_default(app, ["--list"], CMD)
        assert result.lines == [
            "cmd user <user_id> --email <email>",
            "  --email (string, required)",
        ]

    async def test_help_lists_global_flags(self, example_app):
        result = await run_cli_default(example_app, ["--help"], CMD)
        assert result.code == 0
        assert "Flags:" in result.lines
        assert any("--json" in line for line in result.lines)
        assert "cmd hello <name>" in result.lines

    async def test_openapi_listing_with_param_lines(self, static_handler):
        document = {"paths": {"/user/{id}": {"post": {"parameters": [
            {"name": "id", "in": "path", "required": True},
            {"name": "email", "in": "query", "required": True, "description": "user email", "schema": {"type": "string"}},
        ]}}}}
        options = AdapterOptions(command_base="cmd", openapi=document)
        result = await run_cli_default(static_handler(), ["--list"], options)
        assert result.lines == [
            "cmd user <id> --email <email>",
            "  --email (string, required) : user email",
        ]

    async def test_handler_without_routes_lists_nothing(self, static_handler):
        result = await run_cli_default(static_handler(), ["--list"], CMD)
        assert result.code == 0
        assert result.lines == []


class TestDispatchMode:
    async def test_raw_text_output(self, static_handler):
        result = await run_cli_default(static_handler(body='{"ok":true}'), ["ping"])
        assert result.code == 0
        assert result.lines == ['{"ok":true}']

    async def test_json_output(self, static_handler):
        result = await run_cli_default(static_handler(body='{"ok":true}'), ["ping", "--json"])
        assert result.code == 0
        assert result.lines == ['{\n  "status": 200,\n  "data": {\n    "ok": true\n  }\n}']

    async def test_json_output_falls_back_to_raw_text(self, static_handler):
        result = await run_cli_default(static_handler(body="plain"), ["ping", "--json"])
        assert json.loads(result.lines[0]) == {"status": 200, "data": "plain"}

    async def test_multiline_body_is_one_line(self, static_handler):
        result = await run_cli_default(static_handler(body="a\nb\n"), ["ping"])
        assert result.lines == ["a\nb\n"]

    @pytest.mark.parametrize("argv", [["ping"], ["ping", "--json"]])
    async def test_unsuccessful_response_exits_1(self, static_handler, argv):
        result = await run_cli_default(static_handler(status=500, body='{"ok":false}'), argv)
        assert result.code == 1
        assert result.response.status_code == 500

    async def test_cli_flags_reserved_from_query(self, static_handler):
        handler = static_handler()
        await run_cli_default(
            handler,
            ["items", "--json", "--base", "/v1", "--env", "A=1", "--limit", "5"],
            AdapterOptions(reserved_keys={"limit"}),
        )
        url = handler.requests[0].url
        assert url.path == "/v1/items"
        assert url.query == b""

    async def test_non_reserved_flags_become_query(self, get_app):
        result = await run_cli(get_app, ["items", "42", "--tag", "a", "--tag", "b", "--deep"])
        data = json.loads(result.lines[0])
        assert data == {"item_id": "42", "query": [["tag", "a"], ["tag", "b"], ["deep", "true"]]}

    async def test_base_flag_overrides_option(self, static_handler):
        handler = static_handler()
        await run_cli_default(handler, ["x", "--base", "/v2"], AdapterOptions(base="/v1"))
        assert handler.requests[0].url.path == "/v2/x"

    async def test_base_option_used_without_flag(self, static_handler):
        handler = static_handler()
        await run_cli_default(handler, ["x"], AdapterOptions(base="/v1"))
        assert handler.requests[0].url.path == "/v1/x"

    async def test_get_variant_missing_route(self, get_app):
        result = await run_cli(get_app, ["missing", "--json"])
        assert result.code == 1
        assert json.loads(result.lines[0]) == {"status": 404, "data": {"error": "not here"}}

    async def test_handler_error_propagates(self):
        class Broken(Handler):
            async def fetch(self, request, env):
                raise ConnectionError("down")

        with pytest.raises(ConnectionError, match="down"):
            await run_cli_default(Broken(), ["ping"])

    async def test_repeated_json_flag_still_pretty_prints(self, static_handler):
        result = await run_cli_default(static_handler(body='{"ok":true}'), ["ping", "--json", "--json"])
        assert result.lines == ['{\n  "status": 200,\n  "data": {\n    "ok": true\n  }\n}']

    async def test_repeated_bare_flag_is_one_query_param(self, static_handler):
        handler = static_handler()
        await run_cli_default(handler, ["x", "--deep", "--deep"])
        assert handler.requests[0].url.params.multi_items() == [("deep", "true")]

    async def test_nan_body_falls_back_to_raw_text(self, static_handler):
        result = await run_cli_default(static_handler(body="NaN"), ["ping", "--json"])
        assert json.loads(result.lines[0]) == {"status": 200, "data": "NaN"}


class TestEnvironment:
    async def test_post_variant_merges_process_env(self, example_app):
        result = await run_cli_default(example_app, ["env", "K"], environ={"K": "proc"})
        assert result.lines == ["K=proc"]

    async def test_post_variant_precedence(self, example_app):
        options = AdapterOptions(env={"K": "opt"})
        result = await run_cli_default(example_app, ["env", "K"], options, environ={"K": "proc"})
        assert result.lines == ["K=opt"]
        result = await run_cli_default(example_app, ["env", "K", "-e", "K=flag"], options, environ={"K": "proc"})
        assert result.lines == ["K=flag"]

    async def test_get_variant_omits_process_env(self, get_app):
        result = await run_cli(get_app, ["env", "K"], environ={"K": "proc"})
        assert result.lines == ["K="]

    async def test_get_variant_flag_beats_option(self, get_app):
        options = AdapterOptions(env={"K": "V2"})
        result = await run_cli(get_app, ["env", "K", "--env", "K=V1"], options)
        assert result.lines == ["K=V1"]

    async def test_post_variant_reads_os_environ_by_default(self, static_handler, monkeypatch):
        monkeypatch.setenv("CLI_ADAPTER_TEST_VALUE", "from-os")
        handler = static_handler()
        await run_cli_default(handler, ["ping"])
        assert handler.envs[0]["CLI_ADAPTER_TEST_VALUE"] == "from-os"


class TestPostBodyAndHooks:
    async def test_tail_becomes_json_body(self, example_app):
        result = await run_cli_default(example_app, ["submit", "--json", "--", "name=Taro", "age=4"])
        assert result.code == 0
        assert json.loads(result.lines[0]) == {
            "status": 200,
            "data": {"ok": True, "received": {"name": "Taro", "age": "4"}},
        }
        assert result.request.headers["content-type"] == "application/json"

    async def test_hook_table_applies_only_matching_hook(self, static_handler):
        handler = static_handler()
        called = {"upload": False, "other": False}

        def upload(req, argv):
            called["upload"] = True
            headers = dict(req.headers)
            headers["x-test"] = "ok"
            return httpx.Request(req.method, req.url, headers=headers, content=req.content)

        def other(req, argv):
            called["other"] = True

        request, _ = await adapt_and_fetch(
            handler, ["upload"], AdapterOptions(before_fetch={"upload": upload, "other": other})
        )
        assert called == {"upload": True, "other": False}
        assert handler.requests[0].headers["x-test"] == "ok"
        assert request is handler.requests[0]

    async def test_get_variant_ignores_hooks(self, static_handler):
        handler = static_handler()
        hits = []
        adapter = create_adapter("GET")
        await adapter.adapt_and_fetch(handler, ["x"], AdapterOptions(before_fetch=lambda r, a: hits.append(r)))
        assert hits == []
        assert handler.requests[0].method == "GET"


class TestVariants:
    def test_create_adapter(self):
        assert create_adapter("get").variant is GET_VARIANT
        assert create_adapter().variant is POST_VARIANT
        with pytest.raises(ValueError, match="Unsupported method"):
            create_adapter("PUT")

    def test_format_output(self):
        assert format_output(200, "x") == "x"
        assert format_output(201, "[1]", as_json=True) == '{\n  "status": 201,\n  "data": [\n    1\n  ]\n}'

    def test_format_output_rejects_non_standard_constants(self):
        for body in ("NaN", "Infinity", "[-Infinity]"):
            assert json.loads(format_output(200, body, as_json=True))["data"] == body
