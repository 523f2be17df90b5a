"""FastAPI web application for Bookshelf."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.datastructures import UploadFile

from .. import __version__
from ..core.config import Settings
from ..core.errors import BookshelfError, StorageError, ValidationError
from ..core.images import ImageStore
from ..core.log_config import configure_logging
from ..core.models import BookFields, Upload
from ..core.service import BookService
from ..core.store import RecordStore

log = structlog.get_logger()

_FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _too_large(request: Request, limit: int) -> JSONResponse | None:
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > limit:
        return JSONResponse(
            {"message": "Request too large", "code": "PAYLOAD_TOO_LARGE"}, status_code=413
        )
    return None


async def _read_payload(request: Request) -> tuple[BookFields, Upload | None]:
    """Decode a JSON, urlencoded or multipart body into fields plus an optional image."""
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        try:
            text = {k: v for k, v in form.items() if isinstance(v, str)}
            upload = None
            image = form.get("image")
            if isinstance(image, UploadFile):
                upload = Upload(
                    filename=image.filename or "",
                    content=await image.read(),
                    content_type=image.content_type or "",
                )
        finally:
            await form.close()
        return BookFields.from_mapping(text), upload

    raw = await request.body()
    if not raw.strip():
        return BookFields(), None
    try:
        body = json.loads(raw)
    except ValueError:
        raise ValidationError("Malformed request body") from None
    if not isinstance(body, dict):
        body = {}
    return BookFields.from_mapping(body), None


def create_app(settings: Settings | None = None) -> FastAPI:
    if settings is None:
        settings = Settings.from_env()

    images = None
    if settings.uploads_enabled:
        images = ImageStore(settings.upload_dir)
        images.ensure_directory()
    service = BookService(RecordStore(settings.books_file), images)

    app = FastAPI(title="Bookshelf", version=__version__)
    app.state.settings = settings
    app.state.service = service

    @app.exception_handler(BookshelfError)
    async def bookshelf_error(request: Request, exc: BookshelfError):
        if isinstance(exc, StorageError):
            log.error("storage_error", path=request.url.path, error=exc.message)
        return JSONResponse(exc.to_response(), status_code=exc.status_code)

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    @app.get("/health")
    async def health():
        # Loading the collection makes an unreadable books file show up here
        # as the usual 500 STORAGE_ERROR body.
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
            "environment": settings.env,
            "uploads": service.uploads_enabled,
            "books": len(service.list_books()),
        }

    @app.get("/books")
    async def list_books():
        return [b.to_dict() for b in service.list_books()]

    @app.get("/books/{isbn}")
    async def get_book(isbn: str):
        return service.get_book(isbn).to_dict()

    @app.post("/books", status_code=201)
    async def create_book(request: Request):
        too_large = _too_large(request, settings.max_upload_bytes)
        if too_large:
            return too_large
        fields, upload = await _read_payload(request)
        book = service.create_book(fields, upload)
        return JSONResponse(book.to_dict(), status_code=201)

    @app.put("/books/{isbn}")
    async def update_book(isbn: str, request: Request):
        too_large = _too_large(request, settings.max_upload_bytes)
        if too_large:
            return too_large
        fields, upload = await _read_payload(request)
        return service.update_book(isbn, fields, upload).to_dict()

    @app.delete("/books/{isbn}")
    async def delete_book(isbn: str):
        return {"message": service.delete_book(isbn)}

    if service.uploads_enabled:

        @app.get("/uploads/{image_name}")
        async def serve_image(image_name: str):
            content, media_type = service.read_image(image_name)
            return Response(content=content, media_type=media_type)

    log.info(
        "app_created",
        books_file=str(settings.books_file),
        uploads=service.uploads_enabled,
        upload_dir=str(settings.upload_dir) if service.uploads_enabled else None,
    )
    return app


def main():
    settings = Settings.from_env()
    configure_logging(settings.log_level, json=not settings.is_dev)
    uvicorn.run(
        "bookshelf.web.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.is_dev,
    )
