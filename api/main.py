from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from core import config
from core.db import Database
from core.errors import install_error_handlers
from core.log import configure_logging
from persons.repository import PersonRepository
from persons.router import router as persons_router
from persons.service import PersonService

logger = logging.getLogger(__name__)


def build_lifespan(database: Database | None = None):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One pool per process; connectivity and schema failures abort startup.
        db = database or Database()
        await db.connect()
        try:
            repository = PersonRepository(db)
            await repository.ensure_schema()
            app.state.person_service = PersonService(repository)
            logger.info("database_ready min_size=%s max_size=%s", db.min_size, db.max_size)
            yield
        finally:
            app.state.person_service = None
            await db.close()

    return lifespan


def create_app(database: Database | None = None) -> FastAPI:
    app = FastAPI(title="Persons API", lifespan=build_lifespan(database))
    install_error_handlers(app)
    app.include_router(persons_router, tags=["persons"])
    return app


app = create_app()


def run() -> None:
    configure_logging()
    logger.info("starting_server host=%s port=%s", config.host(), config.port())
    uvicorn.run(app, host=config.host(), port=config.port(), log_config=None)


if __name__ == "__main__":
    run()
