"""
Dispatcher Test Suite

Tests for core/dispatcher.py and core/responses.py:
- Pass-through of handler results
- Failure envelopes for unknown commands and failing handlers
"""

import json
import sys

import pytest

from bim_bridge.core import responses
from bim_bridge.core.catalog import build_catalog
from bim_bridge.core.contract import HostContext, ParameterDocument, command
from bim_bridge.core.dispatcher import Dispatcher, dispatch

from helpers import FakeContext, make_module


@pytest.fixture
def registry():
    @command("echo", "repeat")
    def echo(ctx: HostContext, params: ParameterDocument) -> str:
        return json.dumps({"params": params, "context": type(ctx).__name__})

    @command("raw")
    def raw(ctx: HostContext, params: ParameterDocument) -> str:
        return "not json at all"

    @command("explode")
    def explode(ctx: HostContext, params: ParameterDocument) -> str:
        raise RuntimeError("wall host element is invalid")

    @command("silentFailure")
    def silent_failure(ctx: HostContext, params: ParameterDocument) -> str:
        raise KeyError()

    @command("returnsDict")
    def returns_dict(ctx, params):
        return {"success": True}

    @command("exitsProcess")
    def exits_process(ctx: HostContext, params: ParameterDocument) -> str:
        sys.exit(3)

    @command("interrupted")
    def interrupted(ctx: HostContext, params: ParameterDocument) -> str:
        raise KeyboardInterrupt

    module = make_module(
        "TestMethods", echo, raw, explode, silent_failure, returns_dict, exits_process, interrupted,
    )
    built, _ = build_catalog([module])
    return built


def assert_failure(result: str) -> dict:
    payload = json.loads(result)
    assert payload["success"] is False
    assert isinstance(payload["error"], str) and payload["error"]
    return payload


class TestPassThrough:
    """Successful results are returned unmodified"""

    def test_result_unmodified(self, registry):
        assert dispatch(registry, "raw", None, {}) == "not json at all"

    def test_context_and_params_forwarded(self, registry):
        result = json.loads(dispatch(registry, "echo", FakeContext(), {"levelId": 7}))
        assert result == {"params": {"levelId": 7}, "context": "FakeContext"}

    def test_none_params_become_empty_document(self, registry):
        result = json.loads(dispatch(registry, "echo", None, None))
        assert result["params"] == {}

    def test_alias_and_casing(self, registry):
        expected = dispatch(registry, "echo", None, {"a": 1})
        assert dispatch(registry, "REPEAT", None, {"a": 1}) == expected
        assert dispatch(registry, "Echo", None, {"a": 1}) == expected


class TestUnknownCommand:
    """Unknown names produce a failure envelope"""

    def test_unknown_name(self, registry):
        payload = assert_failure(dispatch(registry, "totallyUnknownName", None, {}))
        assert payload == {"success": False, "error": "Unknown command: totallyUnknownName"}

    def test_empty_name(self, registry):
        assert_failure(dispatch(registry, "", None, {}))

    def test_non_string_name(self, registry):
        payload = assert_failure(dispatch(registry, None, None, {}))
        assert payload["error"] == "Unknown command: None"


class TestHandlerFailure:
    """Handler exceptions never cross the dispatcher"""

    def test_exception_envelope(self, registry):
        payload = assert_failure(dispatch(registry, "explode", None, {}))
        assert payload["error"] == "wall host element is invalid"
        assert payload["error_type"] == "RuntimeError"
        assert "RuntimeError" in payload["traceback"]

    def test_empty_message_uses_type_name(self, registry):
        payload = assert_failure(dispatch(registry, "silentFailure", None, {}))
        assert payload["error"] == "KeyError"

    def test_traceback_can_be_disabled(self, registry):
        payload = assert_failure(
            dispatch(registry, "explode", None, {}, include_traceback=False)
        )
        assert "traceback" not in payload

    def test_non_string_result(self, registry):
        payload = assert_failure(dispatch(registry, "returnsDict", None, {}))
        assert "returned dict" in payload["error"]
        assert payload["error_type"] == "TypeError"

    def test_system_exit_enveloped(self, registry):
        payload = assert_failure(dispatch(registry, "exitsProcess", None, {}))
        assert payload["error"] == "3"
        assert payload["error_type"] == "SystemExit"

    def test_keyboard_interrupt_propagates(self, registry):
        with pytest.raises(KeyboardInterrupt):
            dispatch(registry, "interrupted", None, {})


class TestDispatcher:
    """Test the Dispatcher wrapper"""

    def test_invoke(self, registry):
        dispatcher = Dispatcher(registry)
        assert dispatcher.invoke("raw", None) == "not json at all"
        assert dispatcher.registry is registry

    def test_include_traceback_flag(self, registry):
        dispatcher = Dispatcher(registry, include_traceback=False)
        payload = assert_failure(dispatcher.invoke("explode", None, {}))
        assert "traceback" not in payload

    def test_list_commands(self, registry):
        names = [d.primary_name for d in Dispatcher(registry).list_commands()]
        assert names == [
            "echo", "raw", "explode", "silentFailure", "returnsDict", "exitsProcess", "interrupted",
        ]


class TestResponses:
    """Test the envelope helpers"""

    def test_success_with_result(self):
        assert json.loads(responses.success({"count": 2})) == {
            "success": True, "result": {"count": 2},
        }

    def test_success_fields_only(self):
        assert json.loads(responses.success(message="done")) == {
            "success": True, "message": "done",
        }

    def test_failure_extra_fields(self):
        payload = json.loads(responses.failure("bad", hint="retry"))
        assert payload == {"success": False, "error": "bad", "hint": "retry"}

    def test_non_json_values_stringified(self):
        from pathlib import Path
        payload = json.loads(responses.success({"path": Path("a/b")}))
        assert payload["result"]["path"] == str(Path("a/b"))
