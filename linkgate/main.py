import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from linkgate.api.routers import auth, downloads, links, storage
from linkgate.core.config import Settings, get_settings
from linkgate.core.errors import LinkError
from linkgate.core.log_config import configure_logging
from linkgate.db.session import Database
from linkgate.services.signer import S3Signer, Signer

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    "invalid_input": 400,
    "not_found": 404,
    "expired": 410,
    "exhausted": 410,
    "signer_error": 502,
}


def no_store(response):
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
    response.headers["Pragma"] = "no-cache"
    return response


def create_app(
    settings: Settings | None = None,
    signer: Signer | None = None,
    database: Database | None = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.database.open()
        if app.state.signer is None:
            app.state.signer = S3Signer.from_settings(settings)
        if not settings.jwt_secret:
            logger.warning("LINKGATE_JWT_SECRET is not set; admin login is disabled")
        logger.info(f"{settings.app_name} serving downloads under /{settings.download_prefix}/")
        try:
            yield
        finally:
            app.state.database.close()

    docs_url = "/docs" if settings.enable_docs else None
    redoc_url = "/redoc" if settings.enable_docs else None
    openapi_url = "/openapi.json" if settings.enable_docs else None

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        docs_url=docs_url,
        redoc_url=redoc_url,
        openapi_url=openapi_url,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.signer = signer
    app.state.database = database or Database(settings.database_url, echo=settings.db_echo)

    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["*"],
        allow_headers=["*"],
        # browsers reject credentials with a wildcard origin
        allow_credentials=origins != ["*"],
    )

    @app.middleware("http")
    async def add_no_cache_headers(request: Request, call_next):
        response = await call_next(request)
        if response.headers.get("content-type", "").startswith("application/json"):
            no_store(response)
        return response

    @app.exception_handler(LinkError)
    async def link_error_handler(request: Request, exc: LinkError):
        status_code = ERROR_STATUS.get(exc.kind, 500)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.kind}")
        return no_store(JSONResponse(status_code=status_code, content=exc.to_dict()))

    @app.get("/healthz", tags=["health"])
    def health_check():
        return "ok"

    app.include_router(auth.router)
    app.include_router(links.router)
    app.include_router(storage.router)
    app.include_router(downloads.router, prefix=f"/{settings.download_prefix}")
    return app


configure_logging(get_settings())
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "linkgate.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=None,
    )
