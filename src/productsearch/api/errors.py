"""HTTP status mapping for productsearch errors."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from productsearch.errors import IndexWriteError, InvalidCursorError, InvalidQueryError, RankingNotFoundError


async def bad_request_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def not_found_handler(request: Request, exc: RankingNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def index_write_handler(request: Request, exc: IndexWriteError):
    return JSONResponse(status_code=502, content={"detail": str(exc), "product_id": exc.product_id})


def add_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InvalidCursorError, bad_request_handler)
    app.add_exception_handler(InvalidQueryError, bad_request_handler)
    app.add_exception_handler(RankingNotFoundError, not_found_handler)
    app.add_exception_handler(IndexWriteError, index_write_handler)
