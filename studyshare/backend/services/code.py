"""
Code Service.

Private saved codes and public snippet share links.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from studyshare.backend.core.config import get_server_base_url
from studyshare.backend.core.exceptions import NotFoundError
from studyshare.backend.core.session import SessionUser
from studyshare.backend.models.code import ANONYMOUS_OWNER, SavedCode, Snippet
from studyshare.backend.repositories.code import SavedCodeRepository, SnippetRepository
from studyshare.backend.services.base import BaseService


def snippet_link(snippet_id: str) -> str:
    """Public URL of a shared snippet."""
    return f"{get_server_base_url()}/snippet/{snippet_id}"


class CodeService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.codes = SavedCodeRepository(session)
        self.snippets = SnippetRepository(session)

    async def save_code(self, owner: SessionUser, title: str, language: str, code: str) -> SavedCode:
        self._log_operation("Saving code", user_id=owner.id, language=language)
        return await self._execute_db_operation(
            "save_code",
            self.codes.create(user_id=owner.id, title=title or "", language=language or "", code=code or ""),
        )

    async def list_codes(self, owner: SessionUser) -> list[SavedCode]:
        """The owner's codes, newest first."""
        return await self.codes.list_for_owner(owner.id)

    async def get_owned_code(self, owner: SessionUser, code_id: str) -> SavedCode:
        """
        A saved code belonging to the owner.

        Raises:
            NotFoundError: If the code is missing or owned by someone else
        """
        code = await self.codes.get_owned_or_none(code_id, owner.id)
        if code is None:
            raise NotFoundError("Code not found")
        return code

    async def delete_code(self, owner: SessionUser, code_id: str) -> None:
        """Delete one of the owner's codes. Other users' codes are left untouched."""
        code = await self.get_owned_code(owner, code_id)
        await self._execute_db_operation("delete_code", self.codes.delete(code.id))
        self._log_operation("Code deleted", user_id=owner.id, code_id=code_id)

    async def save_snippet(
        self,
        owner: SessionUser | None,
        name: str,
        language: str,
        code: str,
    ) -> tuple[Snippet, str]:
        """Store an immutable snippet and return it with its share link."""
        snippet = await self._execute_db_operation(
            "save_snippet",
            self.snippets.create(
                user_id=owner.id if owner else ANONYMOUS_OWNER,
                name=name or "",
                language=language or "",
                code=code or "",
            ),
        )
        link = snippet_link(snippet.id)
        self._log_operation("Snippet shared", snippet_id=snippet.id)
        return snippet, link

    async def get_snippet_or_none(self, snippet_id: str) -> Snippet | None:
        return await self.snippets.get_by_id_or_none(snippet_id)
