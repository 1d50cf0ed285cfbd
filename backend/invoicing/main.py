# GST invoicing backend entrypoint: FastAPI app wiring.

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.invoicing.api import identifiers
from backend.invoicing.api import invoices
from backend.invoicing.core.dev_seed import ensure_default_issuer
from backend.invoicing.core.errors import InvoicingError, ValidationFailed
from backend.invoicing.core.logging_config import setup_logging
from backend.invoicing.core.settings import get_settings
from backend.invoicing.db.base import Base
from backend.invoicing.db.session import SessionLocal, engine

logger = logging.getLogger(__name__)

app = FastAPI()
settings = get_settings()

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(invoices.router)
app.include_router(identifiers.router)


@app.exception_handler(InvoicingError)
async def handle_invoicing_error(request: Request, exc: InvoicingError):
    if exc.http_status >= 500:
        logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    body = {"code": exc.code, "detail": exc.message}
    if isinstance(exc, ValidationFailed):
        body["errors"] = exc.errors
    return JSONResponse(status_code=exc.http_status, content=body)


def _describe_request_error(error: dict) -> str:
    location = ".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path"))
    return f"{location}: {error['msg']}" if location else error["msg"]


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    failure = ValidationFailed(
        [_describe_request_error(error) for error in exc.errors()],
        message="Request failed validation",
    )
    return await handle_invoicing_error(request, failure)


@app.get("/")
def read_root():
    return {"app": "GST invoicing backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def prepare_database():
    setup_logging(settings)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        ensure_default_issuer(db, settings)
    finally:
        db.close()
