"""JSON envelope helpers shared by handlers and the dispatcher.

Success:  {"success": true, "result": ...}
Failure:  {"success": false, "error": "..."}
"""

import json
import traceback
from typing import Any


def _dump(payload: dict) -> str:
    return json.dumps(payload, default=str, ensure_ascii=False)


def success(result: Any = None, **fields: Any) -> str:
    """Build a success envelope"""
    payload: dict[str, Any] = {"success": True}
    if result is not None:
        payload["result"] = result
    payload.update(fields)
    return _dump(payload)


def failure(error: str, **fields: Any) -> str:
    """Build a failure envelope"""
    payload: dict[str, Any] = {"success": False, "error": error}
    payload.update(fields)
    return _dump(payload)


def from_exception(exc: BaseException, include_traceback: bool = True) -> str:
    """Build a failure envelope describing an exception"""
    fields: dict[str, Any] = {"error_type": type(exc).__name__}
    if include_traceback:
        fields["traceback"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return failure(str(exc) or type(exc).__name__, **fields)
