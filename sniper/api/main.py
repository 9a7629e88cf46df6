from contextlib import asynccontextmanager
from datetime import datetime

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from sniper.access.controller import AccessController
from sniper.access.store import LicenseStore, build_store, load_license_file, seed_store
from sniper.analytics.detector import PatternDetector
from sniper.api.routes import router
from sniper.config import Settings, settings
from sniper.log import setup_logger


def create_app(cfg: Settings = settings, store: LicenseStore | None = None,
               clock=datetime.now) -> FastAPI:
    seed = store is None
    if store is None:
        store = build_store(cfg.license_store, cfg.db_dsn)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger = setup_logger("sniper", cfg.log_level)
        if seed:
            seed_store(store, load_license_file(cfg.licenses_file))
        logger.info("Sniper API ready, rules: %s", ", ".join(app.state.detector.rule_names()))
        yield

    app = FastAPI(title="Sniper API", lifespan=lifespan)
    app.state.settings = cfg
    app.state.controller = AccessController(store, clock=clock)
    app.state.detector = PatternDetector.from_settings(cfg)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)

    @app.get("/", response_class=PlainTextResponse)
    def home():
        return "Sniper is awake and running"

    return app


app = create_app()


def serve():
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    serve()
