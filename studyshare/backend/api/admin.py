"""
Admin Panel.

Login, dashboard counts, the full note list with soft delete, search and
reports. Admin views include removed notes.
"""

from typing import Annotated

from fastapi import APIRouter, Form, Request
from fastapi.responses import RedirectResponse, Response

from studyshare.backend.core.dependencies import CurrentAdmin, DbSession
from studyshare.backend.core.exception_handlers import status_for
from studyshare.backend.core.exceptions import AuthenticationError, NotFoundError
from studyshare.backend.core.session import ADMIN_SLOT, SessionAdmin, end_session, start_admin_session
from studyshare.backend.core.templating import render
from studyshare.backend.services.moderation import ModerationService
from studyshare.backend.services.user import AdminService

router = APIRouter()


@router.get("/login")
async def login_page(request: Request) -> Response:
    return render(request, "admin/login.html", {"error": None})


@router.post("/login")
async def login(
    request: Request,
    db: DbSession,
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> Response:
    try:
        admin = await AdminService(db).authenticate(username, password)
    except (NotFoundError, AuthenticationError) as e:
        return render(request, "admin/login.html", {"error": e.message}, status_code=status_for(e))

    response = RedirectResponse("/admin/dashboard", status_code=303)
    start_admin_session(response, SessionAdmin(id=admin.id, username=admin.username))
    return response


@router.get("/logout")
async def logout() -> Response:
    response = RedirectResponse("/admin/login", status_code=303)
    end_session(response, ADMIN_SLOT)
    return response


@router.get("/dashboard")
async def dashboard(request: Request, db: DbSession, admin: CurrentAdmin) -> Response:
    counts = await ModerationService(db).dashboard_counts()
    return render(request, "admin/dashboard.html", {"admin": admin, "counts": counts})


@router.get("/manage-notes")
async def manage_notes(request: Request, db: DbSession, admin: CurrentAdmin) -> Response:
    notes = await ModerationService(db).all_notes()
    return render(request, "admin/manage_notes.html", {"notes": notes})


@router.post("/remove/{note_id}")
async def remove_note(note_id: str, db: DbSession, admin: CurrentAdmin) -> Response:
    """Soft-delete a note. The record stays; public views stop showing it."""
    await ModerationService(db).remove_note(note_id)
    return RedirectResponse("/admin/manage-notes", status_code=303)


@router.get("/search")
async def search(request: Request, db: DbSession, admin: CurrentAdmin, q: str | None = None) -> Response:
    notes = await ModerationService(db).search(q)
    return render(request, "admin/search.html", {"notes": notes, "q": q or ""})


@router.get("/reports")
async def reports(request: Request, db: DbSession, admin: CurrentAdmin) -> Response:
    result = await ModerationService(db).reports()
    return render(request, "admin/reports.html", {
        "top_rated": result.top_rated,
        "most_downloaded": result.most_downloaded,
    })
