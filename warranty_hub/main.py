# warranty_hub/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from warranty_hub.api import build_api_router
from warranty_hub.data.database import Base, init_db
from warranty_hub.domain.errors import ServerError
from warranty_hub.utils.settings import CORS_ORIGINS
from warranty_hub.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"Database ready, tables: {sorted(Base.metadata.tables.keys())}")
    yield


async def unhandled_error(request: Request, exc: Exception):
    # treść błędu bazy nie trafia do klienta
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    error = ServerError("Server error")
    return JSONResponse(status_code=error.status_code, content={"detail": error.to_detail()})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Warranty Hub",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials="*" not in CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(Exception, unhandled_error)

    app.include_router(build_api_router())

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
