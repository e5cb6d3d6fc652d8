"""
Note Pages.

Home page, listing, upload, file delivery, rating and the leaderboard API.
"""

from typing import Annotated, Any

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, RedirectResponse, Response
from sqlalchemy.exc import SQLAlchemyError

from studyshare.backend.api.forms import parse_payload
from studyshare.backend.core.dependencies import CurrentIdentity, CurrentUser, DbSession
from studyshare.backend.core.exception_handlers import status_for
from studyshare.backend.core.exceptions import ApplicationError
from studyshare.backend.core.logging import get_logger
from studyshare.backend.core.storage import discard_uploads, resolve_upload, save_upload
from studyshare.backend.core.templating import render
from studyshare.backend.core.utils import format_rating
from studyshare.backend.schemas.base import ActionResult
from studyshare.backend.schemas.note import RateRequest, RateResponse
from studyshare.backend.services.note import NoteService

router = APIRouter()
logger = get_logger(__name__)


@router.get("/")
async def home(request: Request, db: DbSession) -> Response:
    """Top rated notes and the uploader leaderboard."""
    try:
        page = await NoteService(db).home()
    except (ApplicationError, SQLAlchemyError) as e:
        logger.error("Home page failed", extra={"error": str(e)})
        return PlainTextResponse("Error loading home page", status_code=500)

    return render(request, "index.html", {
        "notes": page.top_notes,
        "leaderboard": page.leaderboard,
    })


@router.get("/api/leaderboard")
async def leaderboard(db: DbSession) -> list[dict[str, Any]]:
    """Live leaderboard; an empty list when the store is unavailable."""
    try:
        entries = await NoteService(db).leaderboard()
    except (ApplicationError, SQLAlchemyError) as e:
        logger.error("Leaderboard failed", extra={"error": str(e)})
        return []
    return [entry.to_json() for entry in entries]


@router.get("/notes")
async def list_notes(
    request: Request,
    db: DbSession,
    user: CurrentUser,
    search: str | None = None,
    subject: str | None = None,
    sort: str | None = None,
) -> Response:
    service = NoteService(db)
    notes = await service.list_notes(search=search, subject=subject, sort=sort)
    return render(request, "notes.html", {
        "notes": notes,
        "subjects": await service.subjects(),
        "search": search or "",
        "subject": subject or "all",
        "sort": sort or "newest",
    })


@router.get("/upload")
async def upload_page(request: Request, user: CurrentUser) -> Response:
    return render(request, "upload.html")


@router.post("/upload")
async def upload(
    db: DbSession,
    user: CurrentUser,
    title: Annotated[str, Form()] = "",
    subject: Annotated[str, Form()] = "",
    file: Annotated[UploadFile | None, File()] = None,
    cover_image: Annotated[UploadFile | None, File(alias="coverImage")] = None,
) -> Response:
    """Store the document and cover image, then create the note."""
    if file is None or cover_image is None:
        return PlainTextResponse("Upload failed", status_code=400)

    service = NoteService(db)
    stored: list[str] = []
    try:
        service.check_upload(title, subject)
        stored.append(await save_upload(file))
        stored.append(await save_upload(cover_image))
        await service.upload(user, title, subject, *stored)
    except ApplicationError as e:
        await db.rollback()
        discard_uploads(stored)
        logger.warning("Upload failed", extra={"error": e.message})
        return PlainTextResponse("Upload failed", status_code=status_for(e))

    return RedirectResponse("/", status_code=303)


@router.get("/download/{note_id}")
async def download(note_id: str, db: DbSession, user: CurrentUser) -> Response:
    """Serve the note as an attachment and count the download."""
    service = NoteService(db)
    try:
        note = await service.get_visible(note_id)
        path = resolve_upload(note.file)
        await service.register_download(note_id)
    except ApplicationError as e:
        return PlainTextResponse("Note not found", status_code=status_for(e))
    return FileResponse(path, filename=note.file)


@router.get("/view/{note_id}")
async def view(note_id: str, db: DbSession, user: CurrentUser) -> Response:
    try:
        note = await NoteService(db).get_visible(note_id)
        path = resolve_upload(note.file)
    except ApplicationError as e:
        return PlainTextResponse("Note not found", status_code=status_for(e))
    return FileResponse(path, filename=note.file, content_disposition_type="inline")


@router.post("/rate/{note_id}")
async def rate(note_id: str, request: Request, db: DbSession, identity: CurrentIdentity) -> Response:
    """Submit a rating; the reply carries the new mean and count."""
    try:
        body = await parse_payload(request, RateRequest)
        result = await NoteService(db).rate_note(note_id, identity.user, body.rating)
    except ApplicationError as e:
        await db.rollback()
        return JSONResponse(
            ActionResult(success=False, message=e.message).model_dump(),
            status_code=status_for(e),
        )

    response = RateResponse(rating=format_rating(result.rating), rating_count=result.rating_count)
    return JSONResponse(response.model_dump(by_alias=True))
