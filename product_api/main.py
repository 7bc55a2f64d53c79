# product_api/main.py
import asyncio
import logging
import os
import signal
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from product_api.config import Settings
from product_api.database import ProductStore, build_store
from product_api.errors import ConfigError
from product_api.logging_setup import configure_logging
from product_api.responses import register_error_handlers, store_not_ready
from product_api.routes import router

logger = logging.getLogger(__name__)


def _on_connect_done(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.critical("Product store connection error: %s", exc)
        # same effect as a failed startup: let the server shut down
        os.kill(os.getpid(), signal.SIGTERM)


def create_app(settings: Optional[Settings] = None, store: Optional[ProductStore] = None) -> FastAPI:
    """
    Build the application around a single store handle.

    The store connects in the background once the app starts; until it
    reports ready every request is answered with 503.
    """
    if store is None:
        store = build_store(settings or Settings.from_env())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        connecting = asyncio.create_task(store.connect())
        connecting.add_done_callback(_on_connect_done)
        try:
            yield
        finally:
            if not connecting.done():
                connecting.cancel()
            await store.close()

    app = FastAPI(title="product-api", lifespan=lifespan)
    app.state.store = store

    # middleware added later wraps the earlier ones; the readiness gate
    # runs inside the request logger, and CORS wraps both
    @app.middleware("http")
    async def require_ready_store(request: Request, call_next):
        if not request.app.state.store.ready:
            return store_not_ready()
        return await call_next(request)

    @app.middleware("http")
    async def log_request(request: Request, call_next):
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"
        logger.info("%s %s", request.method, path)
        return await call_next(request)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(router)
    return app


def run() -> None:
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        configure_logging()
        logger.critical("%s", e)
        sys.exit(1)

    configure_logging(settings.log_level)
    app = create_app(settings)
    logger.info("Server running on http://localhost:%d", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
