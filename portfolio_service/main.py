from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .logging import setup_logging
from .api.routes import router as api_router
from .config import settings
from .pipeline.snapshot import PortfolioSnapshot, load_snapshot
from .utils import now_utc_iso

def create_app(snapshot: PortfolioSnapshot | None = None, workbook_path: str | None = None) -> FastAPI:
    """Build the API. Without an injected snapshot the workbook is loaded once at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.snapshot is None:
            path = workbook_path or settings.workbook_path
            # an IngestionError here aborts startup
            app.state.snapshot = load_snapshot(path, value_tolerance_pct=settings.summary_value_tolerance_pct)
            app.state.source = path
            app.state.loaded_at_utc = now_utc_iso()
        yield

    app = FastAPI(title="portfolio-service", lifespan=lifespan)
    app.state.snapshot = snapshot
    app.state.source = "injected" if snapshot is not None else None
    app.state.loaded_at_utc = now_utc_iso() if snapshot is not None else None
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list(),
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(api_router)

    @app.exception_handler(404)
    async def not_found(request: Request, exc):
        return JSONResponse({'error': 'Endpoint not found'}, status_code=404)

    return app

setup_logging()
app = create_app()

def run():
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
