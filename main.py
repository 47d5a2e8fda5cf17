import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from pymongo.errors import PyMongoError

from adapters.entry.http.gateway import GatewayApp, build_graphql_app
from adapters.external.database.mongodb_client import MongoStoreConnector, get_mongo_client
from adapters.external.unistats.unistats_http_client import UnistatsHttpClient
from config.settings import settings
from core.repositories.store_connection import StoreConnector
from core.repositories.university_data_source import UniversityDataSource


def _setup_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(
    *,
    connector: Optional[StoreConnector] = None,
    data_source: Optional[UniversityDataSource] = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    Without arguments, MongoDB and Unistats clients are created in the lifespan from
    settings; tests pass their own connector and data source instead.
    """
    gateway = GatewayApp(graphql_app=build_graphql_app(graphiql=settings.GRAPHIQL_ENABLED))
    if connector is not None and data_source is not None:
        gateway.bind(connector=connector, data_source=data_source)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _setup_logging()
        logger = logging.getLogger(__name__)
        logger.info("Starting %s (lifespan startup)...", settings.APP_NAME)

        mongo: MongoStoreConnector | None = None
        unistats: UnistatsHttpClient | None = None
        if connector is None or data_source is None:
            mongo = MongoStoreConnector(get_mongo_client(), settings.MONGODB_DB_NAME)
            try:
                await mongo.ensure_indexes()
            except PyMongoError as exc:
                logger.warning("Could not ensure indexes, continuing: %s", exc)

            unistats = UnistatsHttpClient(
                base_url=settings.UNISTATS_BASE_URL,
                auth=settings.UNISTATS_AUTH,
                timeout_s=settings.UNISTATS_TIMEOUT_S,
            )
            gateway.bind(connector=mongo, data_source=unistats)

        try:
            yield
        finally:
            logger.info("Shutting down %s (lifespan shutdown)...", settings.APP_NAME)
            if unistats is not None:
                await unistats.aclose()
            if mongo is not None:
                mongo.close()

    app = FastAPI(title=settings.APP_NAME, version="0.1.0", lifespan=lifespan)

    @app.get("/", include_in_schema=False)
    async def homepage() -> RedirectResponse:
        return RedirectResponse(settings.HOMEPAGE_URL)

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok"}

    app.mount("/v0", gateway)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT)
