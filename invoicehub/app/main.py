# InvoiceHub API entrypoint.

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from invoicehub.app.api import analytics
from invoicehub.app.api import clients
from invoicehub.app.api import invoice_templates
from invoicehub.app.api import invoices
from invoicehub.app.api import login
from invoicehub.app.api import register
from invoicehub.app.api import settings as settings_api
from invoicehub.app.api import upload
from invoicehub.app.core.errors import InvoiceHubError
from invoicehub.app.core.logging import configure_logging
from invoicehub.app.core.seed import seed_on_startup
from invoicehub.app.core.settings import get_settings
from invoicehub.app.db.base import Base
from invoicehub.app.db.session import SessionLocal, engine

configure_logging()
LOGGER = structlog.get_logger(__name__)

settings = get_settings()
Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.app_name, version=settings.api_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(register.router)
app.include_router(login.router)
app.include_router(settings_api.router)
app.include_router(clients.router)
app.include_router(invoices.router)
app.include_router(analytics.router)
app.include_router(invoice_templates.router)
app.include_router(upload.router)

if settings.storage_bucket.lower() == "local":
    app.mount("/static", StaticFiles(directory=settings.local_storage_path, check_dir=False), name="static")


@app.exception_handler(InvoiceHubError)
async def invoicehub_error_handler(request: Request, exc: InvoiceHubError):
    if exc.status_code >= 500:
        LOGGER.error("request_failed", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    LOGGER.error("database_error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=502, content={"detail": "Storage operation failed"})


@app.get("/")
def read_root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def seed_system_templates():
    db = SessionLocal()
    try:
        seed_on_startup(db)
    finally:
        db.close()
