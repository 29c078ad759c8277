"""Product search FastAPI application.

Serves cursor-paged product queries and the index operations endpoints.
Every request runs inside the productsearch domain context so reindex
signals published from a request reach the configured broker.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → inline broker, sync processing
#   - "production" → Redis broker, subscribers run in the Engine
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from productsearch.domain import productsearch

productsearch.init(traverse=False)

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Product Search API",
    description="Product search queries and index operations",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the productsearch domain context for each request."""
    with productsearch.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from productsearch.api import add_exception_handlers, operations_router, search_router  # noqa: E402

add_exception_handlers(app)
app.include_router(search_router)
app.include_router(operations_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": productsearch.name}})
