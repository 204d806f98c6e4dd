"""
eBay MCP Bridge - FastAPI Main Entry

✅ LOCAL:
    cd backend
    source .venv/bin/activate
    python -m uvicorn ebay_mcp.main:app --reload --host 0.0.0.0 --port 8000

✅ TEST LOCALLY:
    curl -i http://127.0.0.1:8000/health
    curl -i http://127.0.0.1:8000/mcp
    curl -s -X POST http://127.0.0.1:8000/mcp \
        -H 'Content-Type: application/json' \
        -d '{"jsonrpc":"2.0","id":1,"method":"tools/call","params":{"name":"search_ebay","arguments":{"query":"iphone 13 -cracked","limit":5,"sort":"PRICE_ASC"}}}'

✅ REQUIRED ENV:
    EBAY_CLIENT_ID, EBAY_CLIENT_SECRET
    EBAY_REFRESH_TOKEN (optional; without it the client_credentials grant is used)

✅ PRODUCTION (Render):
    Build Command:
        pip install .

    Start Command:
        python -m uvicorn ebay_mcp.main:app --host 0.0.0.0 --port $PORT
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ebay_mcp.core.config import settings
from ebay_mcp.core.logging_config import configure_logging

# ✅ Routers
from ebay_mcp.api.routes_mcp import router as mcp_router


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="eBay MCP Bridge",
        version=settings.APP_VERSION,
        description="JSON-RPC (MCP) bridge exposing the search_ebay tool over the eBay Browse API",
    )

    # ✅ CORS
    # Browser-based MCP clients send an OPTIONS preflight before each POST
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # ✅ Root (GET /)
    @app.get("/")
    def root():
        return {
            "name": "eBay MCP Bridge",
            "status": "ok",
            "mcp": "/mcp",
            "health": "/health",
            "version": "/version",
        }

    # ✅ Health Check (GET /health)
    @app.get("/health")
    def health():
        return {"ok": True}

    # ✅ Version endpoint (GET /version)
    @app.get("/version")
    def version():
        return {"version": settings.APP_VERSION, "build": settings.BUILD_ID}

    # ✅ Mount routers
    app.include_router(mcp_router)

    return app


app = create_app()
