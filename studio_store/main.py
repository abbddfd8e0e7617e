# studio_store/main.py
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from studio_store.api.routers import admin, auth, cart, catalog, custom_requests, health, orders, state
from studio_store.utils.logging import get_logger
from studio_store.utils.settings import ATTACHMENTS_DIR, BACKEND_MODE

logger = get_logger(__name__)


def init_database() -> None:
    #import de todos los modelos antes de create_all
    from studio_store.data.database import Base, engine
    import studio_store.data.models  # noqa: F401

    logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    logger.info("Database tables created")


def create_app(backend_mode: str = BACKEND_MODE) -> FastAPI:
    app = FastAPI(
        title="PHK Studio Storefront",
        version="1.0.0",
    )

    if backend_mode == "sql":
        init_database()
        #adjuntos servidos desde disco en modo autoalojado
        app.mount(
            "/files",
            StaticFiles(directory=str(Path(ATTACHMENTS_DIR)), check_dir=False),
            name="files",
        )

    app.include_router(health.router)
    app.include_router(state.router)
    app.include_router(catalog.router)
    app.include_router(cart.router)
    app.include_router(auth.router)
    app.include_router(orders.router)
    app.include_router(custom_requests.router)
    app.include_router(admin.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
