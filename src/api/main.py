"""
FastAPI backend: contact search, listing, creation and batch sync.
Run with uvicorn: uvicorn api.main:app --reload (or python -m api, which probes the DB first).
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from rolodex.infrastructure.config import configure_logging, load_env

load_env()

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from rolodex.application import ContactService, RolodexError, ValidationError
from rolodex.infrastructure import (
    PoolManager,
    Settings,
    SqlContactRepository,
    TimedExecutor,
    contacts_table,
    ensure_schema,
)

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"


def _blank_to_none(value: str | None) -> str | None:
    """Empty photo_url from clients means "no photo"; mapped here, not in the store."""
    if value is None or not value.strip():
        return None
    return value


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    pool: PoolManager | None = app.state.pool
    if pool is None:
        pool = PoolManager.from_settings(settings)
        # Unreachable propagates: uvicorn aborts startup with a non-zero exit.
        await run_in_threadpool(pool.probe, settings.probe_attempts, settings.probe_delay)
        app.state.pool = pool
    table = contacts_table(settings.table_name)
    if settings.create_schema:
        await run_in_threadpool(ensure_schema, pool.engine, table)
    executor = TimedExecutor(pool, default_timeout=settings.query_timeout)
    app.state.service = ContactService(SqlContactRepository(executor, table))
    logger.info("Contact API ready (pool_size=%d, query_timeout=%.1fs)", pool.size, settings.query_timeout)
    try:
        yield
    finally:
        logger.info("Shutting down: draining in-flight queries")
        executor.close(wait=True)
        pool.dispose()


def get_service(request: Request) -> ContactService:
    return request.app.state.service


def require_api_key(
    request: Request,
    x_api_key: str | None = Header(None, alias=API_KEY_HEADER),
) -> None:
    """Shared-secret gate; open when API_KEY is unset."""
    expected = request.app.state.settings.api_key
    if expected and x_api_key != expected:
        raise HTTPException(status_code=401, detail="Unauthorized")


# --- Request bodies ---


class CreateContactBody(BaseModel):
    phone: str | None = None
    name: str | None = None
    names: str | None = None
    photo_url: str | None = None


class SyncContactsBody(BaseModel):
    contacts: list[Any] | None = None


# --- Error mapping ---


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def _request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        where = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{where}: {first.get('msg')}" if where else str(first.get("msg"))
    else:
        message = "Invalid request."
    return JSONResponse(status_code=400, content={"error": message})


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _core_error(request: Request, exc: RolodexError) -> JSONResponse:
    logger.error("%s %s failed: %s: %s", request.method, request.url.path, type(exc).__name__, exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "details": str(exc)},
    )


# --- App ---


def create_app(settings: Settings | None = None, pool: PoolManager | None = None) -> FastAPI:
    """Build the app. A pre-probed pool skips the startup probe."""
    app = FastAPI(title="Rolodex API", lifespan=lifespan)
    app.state.settings = settings or Settings.from_env()
    configure_logging(app.state.settings.log_level)
    app.state.pool = pool

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RolodexError, _core_error)

    # --- REST: health ---

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return "API is running"

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # --- REST: contacts ---

    gated = [Depends(require_api_key)]

    @app.get("/api/contacts/search", dependencies=gated)
    def search_contacts(
        q: str | None = None,
        field: str | None = Query(None, alias="type"),
        page: str | None = None,
        limit: str | None = None,
        service: ContactService = Depends(get_service),
    ):
        result = service.search(q, field, page, limit)
        return {"page": result.page, "limit": result.limit, "results": result.results}

    @app.get("/api/contacts/suggestions", dependencies=gated)
    def suggest_contacts(
        q: str | None = None,
        field: str | None = Query(None, alias="type"),
        limit: str | None = None,
        service: ContactService = Depends(get_service),
    ):
        return service.suggest(q, field, limit)

    @app.get("/api/numbers", dependencies=gated)
    def list_numbers(
        page: str | None = None,
        limit: str | None = None,
        service: ContactService = Depends(get_service),
    ):
        result = service.list_numbers(page, limit)
        return {"page": result.page, "limit": result.limit, "numbers": result.numbers}

    @app.post("/api/contacts", dependencies=gated)
    def create_contact(
        body: CreateContactBody,
        service: ContactService = Depends(get_service),
    ):
        created = service.create(
            body.phone,
            body.name or body.names,
            _blank_to_none(body.photo_url),
        )
        return JSONResponse(
            content={"message": "Contact added", "id": created.id},
            status_code=201,
        )

    @app.post("/api/contacts/sync", dependencies=gated)
    def sync_contacts(
        body: SyncContactsBody,
        service: ContactService = Depends(get_service),
    ):
        contacts = body.contacts
        if isinstance(contacts, list):
            contacts = [
                {**entry, "photo_url": _blank_to_none(entry.get("photo_url"))}
                if isinstance(entry, dict) and isinstance(entry.get("photo_url"), str)
                else entry
                for entry in contacts
            ]
        synced = service.sync(contacts)
        return JSONResponse(
            content={"message": "Contacts batch synced", "affectedRows": synced.affected_rows},
            status_code=201,
        )

    return app


app = create_app()
