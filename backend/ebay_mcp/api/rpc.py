"""
JSON-RPC 2.0 dispatcher for the MCP tool surface.

handle_rpc() always returns a response envelope; protocol and upstream
failures are encoded in its `error` field, never raised.
"""

import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from ebay_mcp.core.config import settings
from ebay_mcp.core.errors import (
    AuthConfigError,
    BridgeError,
    UpstreamAuthError,
    UpstreamDetailError,
    UpstreamSearchError,
    ValidationError,
)
from ebay_mcp.core.pipeline import search_ebay
from ebay_mcp.schemas.search import MAX_LIMIT, SearchQuery, SortOrder

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "ebay-mcp-bridge"
TOOL_NAME = "search_ebay"

# Standard JSON-RPC codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Server-defined codes, one per failure class
ERROR_CODES: Dict[type, int] = {
    ValidationError: INVALID_PARAMS,
    AuthConfigError: -32001,
    UpstreamAuthError: -32002,
    UpstreamSearchError: -32003,
    UpstreamDetailError: -32004,
}


class RpcError(Exception):
    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


def rpc_result(id_: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": id_, "result": result}


def rpc_error(id_: Any, code: int, message: str, data: Any = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message or "Server error"}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": id_, "error": error}


def text_content(payload: Any) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": json.dumps(payload, ensure_ascii=False)}]}


def search_tool_schema() -> Dict[str, Any]:
    return {
        "name": TOOL_NAME,
        "description": (
            "Search eBay listings (Browse API). Results are enriched with per-item details "
            "and returned as a flat JSON list."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Free-text search, e.g. 'iphone 13 128gb'"},
                "limit": {"type": "integer", "minimum": 1, "maximum": MAX_LIMIT, "default": MAX_LIMIT},
                "offset": {"type": "integer", "minimum": 0, "default": 0},
                "sort": {
                    "type": "string",
                    "enum": [s.value for s in SortOrder],
                    "default": SortOrder.BEST_MATCH.value,
                },
            },
            "required": ["query"],
        },
    }


# ---- Method handlers ----

async def _initialize(params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {"tools": {}},
        "serverInfo": {"name": SERVER_NAME, "version": settings.APP_VERSION},
    }


async def _tools_list(params: Dict[str, Any]) -> Dict[str, Any]:
    return {"tools": [search_tool_schema()]}


async def _call_search_ebay(arguments: Any) -> Dict[str, Any]:
    query = SearchQuery.from_arguments(arguments)
    items = await search_ebay(query)
    return text_content([item.model_dump() for item in items])


TOOLS: Dict[str, Callable[[Any], Awaitable[Dict[str, Any]]]] = {
    TOOL_NAME: _call_search_ebay,
}


async def _tools_call(params: Dict[str, Any]) -> Dict[str, Any]:
    name = params.get("name")
    handler = TOOLS.get(name) if isinstance(name, str) else None
    if handler is None:
        raise RpcError(METHOD_NOT_FOUND, f"Unknown tool '{name}'")
    return await handler(params.get("arguments") or {})


METHODS: Dict[str, Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]] = {
    "initialize": _initialize,
    "tools/list": _tools_list,
    "tools/call": _tools_call,
}


async def handle_rpc(message: Any) -> Dict[str, Any]:
    if not isinstance(message, dict):
        return rpc_error(None, INVALID_REQUEST, "Invalid Request: body must be a JSON object")

    id_: Optional[Any] = message.get("id")
    method = message.get("method")
    if not isinstance(method, str) or not method:
        return rpc_error(id_, INVALID_REQUEST, "Invalid Request: missing method")

    handler = METHODS.get(method)
    if handler is None:
        return rpc_error(id_, METHOD_NOT_FOUND, f"Method not found: {method}")

    params = message.get("params")
    if params is None:
        params = {}
    if not isinstance(params, dict):
        return rpc_error(id_, INVALID_PARAMS, "Invalid params: params must be an object")

    try:
        return rpc_result(id_, await handler(params))
    except RpcError as e:
        return rpc_error(id_, e.code, e.message, e.data)
    except BridgeError as e:
        code = ERROR_CODES.get(type(e), INTERNAL_ERROR)
        logger.warning("%s failed: %s", method, e.describe())
        data = {"status": e.status_code} if e.status_code is not None else None
        return rpc_error(id_, code, e.describe(), data)
    except Exception as e:
        logger.exception("Unhandled error in %s", method)
        return rpc_error(id_, INTERNAL_ERROR, str(e) or type(e).__name__)
