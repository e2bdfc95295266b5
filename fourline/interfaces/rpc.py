"""
rpc.py - JSON-RPC dispatcher for the rating tracker

This module exposes ``record_game`` and ``get_statistics`` through JSON-RPC 2.0
shaped request and response objects. It does not own a transport: callers pass
in a decoded request (``handle``) or JSON text (``handle_json``) and send back
whatever is returned. A request whose id is null is a notification and gets no
response when it succeeds.
"""

import inspect
import json
import traceback
from typing import Any, Callable, Dict, List, Optional

from fourline.debug import debug
from fourline.stats.tracker import RatingTracker, Statistics, statistics_to_json

JSONRPC_VERSION = "2.0"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class RpcError(Exception):
    """An error reported to the caller as a JSON-RPC error object."""
    code = INTERNAL_ERROR

    def __init__(self, message: str, data: Any = None):
        super().__init__(message)
        self.message = message
        self.data = data

    def to_dict(self) -> Dict[str, Any]:
        error = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


class ParseError(RpcError):
    code = PARSE_ERROR


class InvalidRequest(RpcError):
    code = INVALID_REQUEST


class MethodNotFound(RpcError):
    code = METHOD_NOT_FOUND


class InvalidParams(RpcError):
    code = INVALID_PARAMS


class InternalError(RpcError):
    code = INTERNAL_ERROR


class JsonRpcDispatcher:
    """
    Dispatches JSON-RPC requests to a RatingTracker.

    Args:
        tracker: The tracker whose methods are exposed
        on_record: Called with the updated statistics after every successful
            record_game, e.g. to save a snapshot
    """

    def __init__(self, tracker: Optional[RatingTracker] = None,
                 on_record: Optional[Callable[[Dict[str, Statistics]], None]] = None):
        self.tracker = tracker if tracker is not None else RatingTracker()
        self.on_record = on_record
        self._methods: Dict[str, Callable[..., Any]] = {
            "record_game": self._record_game,
            "get_statistics": self._get_statistics,
        }

    @property
    def methods(self) -> List[str]:
        return sorted(self._methods)

    def _record_game(self, player_1, player_2, result):
        updated = self.tracker.record_game(player_1, player_2, result)
        if self.on_record is not None:
            self.on_record(updated)
        return statistics_to_json(updated)

    def _get_statistics(self, names):
        return statistics_to_json(self.tracker.get_statistics(names))

    def _call(self, method: str, params: List[Any]) -> Any:
        handler = self._methods.get(method)
        if handler is None:
            raise MethodNotFound(f"Method not found: {method}")
        try:
            inspect.signature(handler).bind(*params)
        except TypeError as e:
            raise InvalidParams(f"Invalid params for {method}: {e}") from e
        try:
            return handler(*params)
        except ValueError as e:
            raise InvalidParams(str(e)) from e

    def handle(self, request: Any) -> Optional[Dict[str, Any]]:
        """
        Handle one decoded request object.

        Returns:
            The response object, or None for a successful notification
        """
        request_id = None
        try:
            if not isinstance(request, dict):
                raise InvalidRequest("Request must be a JSON object")
            request_id = request.get("id")
            method = request.get("method")
            params = request.get("params", [])
            if not isinstance(method, str):
                raise InvalidRequest("Request method must be a string")
            if not isinstance(params, list):
                raise InvalidParams("Params must be a positional list")

            debug.debug(f"RPC {method} id={request_id!r}", "rpc")
            result = self._call(method, params)
        except RpcError as e:
            debug.warning(f"RPC error {e.code}: {e.message}", "rpc")
            return self._error_response(e, request_id)
        except Exception as e:
            debug.error(f"RPC internal error: {e}", "rpc")
            error = InternalError(str(e) or type(e).__name__, traceback.format_exc())
            return self._error_response(error, request_id)

        if request_id is None:
            return None
        return {"jsonrpc": JSONRPC_VERSION, "result": result, "id": request_id}

    def handle_json(self, text: str) -> Optional[str]:
        """
        Handle one request given as JSON text.

        Returns:
            The response as JSON text, or None for a successful notification
        """
        try:
            request = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            debug.warning(f"RPC: invalid JSON: {e}", "rpc")
            response = self._error_response(ParseError(f"Parse error: {e}"), None)
        else:
            response = self.handle(request)
        if response is None:
            return None
        return json.dumps(response)

    @staticmethod
    def _error_response(error: RpcError, request_id: Any) -> Dict[str, Any]:
        return {"jsonrpc": JSONRPC_VERSION, "error": error.to_dict(), "id": request_id}
