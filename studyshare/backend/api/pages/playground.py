"""
Code Playground.

Runs code through Judge0, keeps a user's private saved codes and creates
public snippet links.
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse, Response

from studyshare.backend.api.forms import parse_payload
from studyshare.backend.clients.judge0 import Judge0Client
from studyshare.backend.core.dependencies import CurrentIdentity, CurrentUser, DbSession
from studyshare.backend.core.exception_handlers import status_for
from studyshare.backend.core.exceptions import ApplicationError, ExternalServiceError, ValidationError
from studyshare.backend.core.logging import get_logger
from studyshare.backend.core.templating import render
from studyshare.backend.schemas.base import ActionResult
from studyshare.backend.schemas.code import (
    RunCodeRequest,
    RunCodeResponse,
    SaveCodeRequest,
    SnippetSaveRequest,
    SnippetSaveResponse,
)
from studyshare.backend.services.code import CodeService

router = APIRouter()
logger = get_logger(__name__)


@router.get("/playground")
async def playground(request: Request) -> Response:
    return render(request, "playground.html", {"code": None})


@router.post("/run-code")
async def run_code(request: Request) -> Response:
    """Execute code remotely. Errors answer `{"error": ...}`."""
    try:
        body = await parse_payload(request, RunCodeRequest)
        result = await Judge0Client().run(body.language, body.code, body.stdin)
    except ValidationError as e:
        return JSONResponse({"error": e.message}, status_code=400)
    except ExternalServiceError as e:
        return JSONResponse({"error": e.message}, status_code=500)
    return JSONResponse(RunCodeResponse(**result).model_dump())


@router.post("/save-code")
async def save_code(request: Request, db: DbSession, identity: CurrentIdentity) -> Response:
    if identity.user is None:
        return JSONResponse(
            ActionResult(success=False, message="Login required").model_dump(),
            status_code=401,
        )

    body = await parse_payload(request, SaveCodeRequest)
    await CodeService(db).save_code(identity.user, body.title, body.language, body.code)
    return JSONResponse(ActionResult(success=True).model_dump(exclude_none=True))


@router.get("/my-codes")
async def my_codes(request: Request, db: DbSession, user: CurrentUser) -> Response:
    codes = await CodeService(db).list_codes(user)
    return render(request, "my_codes.html", {"codes": codes})


@router.get("/code/{code_id}")
async def open_code(code_id: str, request: Request, db: DbSession, user: CurrentUser) -> Response:
    """Open one of the user's saved codes in the editor."""
    try:
        code = await CodeService(db).get_owned_code(user, code_id)
    except ApplicationError as e:
        return PlainTextResponse(e.message, status_code=status_for(e))
    return render(request, "playground.html", {"code": code})


@router.post("/delete-code/{code_id}")
async def delete_code(code_id: str, db: DbSession, user: CurrentUser) -> Response:
    try:
        await CodeService(db).delete_code(user, code_id)
    except ApplicationError as e:
        logger.warning("Delete failed", extra={"code_id": code_id, "error": e.message})
        return PlainTextResponse("Delete failed", status_code=status_for(e))
    return RedirectResponse("/my-codes", status_code=303)


@router.post("/snippet/save")
async def save_snippet(request: Request, db: DbSession, identity: CurrentIdentity) -> Response:
    """Store a snippet and return its public link."""
    try:
        body = await parse_payload(request, SnippetSaveRequest)
        _, link = await CodeService(db).save_snippet(identity.user, body.name, body.language, body.code)
    except ApplicationError as e:
        await db.rollback()
        logger.error("Snippet save failed", extra={"error": e.message})
        return JSONResponse(SnippetSaveResponse(success=False).model_dump(exclude_none=True))
    return JSONResponse(SnippetSaveResponse(link=link).model_dump())


@router.get("/snippet/{snippet_id}")
async def view_snippet(snippet_id: str, request: Request, db: DbSession) -> Response:
    snippet = await CodeService(db).get_snippet_or_none(snippet_id)
    if snippet is None:
        return PlainTextResponse("Snippet not found", status_code=404)
    return render(request, "snippet_view.html", {"snippet": snippet})
