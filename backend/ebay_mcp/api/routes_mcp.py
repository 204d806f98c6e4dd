import json

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ebay_mcp.api.rpc import PARSE_ERROR, TOOL_NAME, handle_rpc, rpc_error

router = APIRouter(tags=["mcp"])


@router.get("/mcp")
@router.get("/api/mcp")
def liveness():
    return {"ok": True, "tool": TOOL_NAME}


@router.post("/mcp")
@router.post("/api/mcp")
async def mcp(request: Request):
    """
    JSON-RPC endpoint. Always HTTP 200: failures live in the envelope's `error`.
    """
    raw = await request.body()
    try:
        message = json.loads(raw or b"")
    except (ValueError, UnicodeDecodeError) as e:
        return JSONResponse(rpc_error(None, PARSE_ERROR, f"Parse error: {e}"), status_code=200)

    return JSONResponse(await handle_rpc(message), status_code=200)
