from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional

from dotenv import load_dotenv

# Load environment variables from .env at project root
# before settings are read by downstream modules.
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from realty_demo.config import settings
from realty_demo.errors import register_error_handlers
from realty_demo.routers import concierge as concierge_router
from realty_demo.routers import dashboard as dashboard_router
from realty_demo.routers import deal_desk as deal_desk_router
from realty_demo.routers import lead_engine as lead_engine_router
from realty_demo.routers import marketing as marketing_router
from realty_demo.services.runtime import DemoRuntime

logger = logging.getLogger("realty_demo.main")


def build_runtime() -> DemoRuntime:
    """Runtime wired to the SQL snapshot table from DATABASE_URL."""
    from realty_demo.db import SessionLocal, init_db
    from realty_demo.services.snapshot_storage import SqlSnapshotStorage

    init_db()
    return DemoRuntime(
        storage=SqlSnapshotStorage(SessionLocal),
        storage_key=settings.demo_storage_key,
        follow_up_clear_seconds=settings.demo_follow_up_clear_seconds,
        client_reply_seconds=settings.demo_client_reply_seconds,
    )


def create_app(runtime: Optional[DemoRuntime] = None) -> FastAPI:
    app = FastAPI(title=settings.app_name, debug=settings.debug)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(dashboard_router.router)
    app.include_router(lead_engine_router.router)
    app.include_router(concierge_router.router)
    app.include_router(deal_desk_router.router)
    app.include_router(marketing_router.router)

    if runtime is not None:
        app.state.demo_runtime = runtime

    @app.on_event("startup")
    async def on_startup() -> None:
        """Restore the demo snapshot and start pumping deferred tasks."""
        logger.info("Starting %s...", settings.app_name)
        if getattr(app.state, "demo_runtime", None) is None:
            app.state.demo_runtime = build_runtime()
            app.state.demo_runtime.restore()
        app.state.pump_task = asyncio.create_task(
            app.state.demo_runtime.pump(settings.demo_pump_interval_seconds)
        )
        logger.info("%s started.", settings.app_name)

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        pump_task = getattr(app.state, "pump_task", None)
        if pump_task is not None:
            pump_task.cancel()
            try:
                await pump_task
            except asyncio.CancelledError:
                pass
        app.state.demo_runtime.shutdown()
        logger.info("%s stopped.", settings.app_name)

    @app.get("/healthz")
    async def healthcheck() -> Dict[str, str]:
        return {"status": "ok", "app": settings.app_name}

    return app


app = create_app()
