"""
Code Repositories.

Shared snippets and per-user saved codes.
"""

from sqlalchemy import select

from studyshare.backend.models.code import SavedCode, Snippet
from studyshare.backend.repositories.base import BaseRepository


class SnippetRepository(BaseRepository[Snippet]):
    model = Snippet
    not_found_message = "Snippet not found"


class SavedCodeRepository(BaseRepository[SavedCode]):
    model = SavedCode
    not_found_message = "Code not found"

    async def list_for_owner(self, user_id: str) -> list[SavedCode]:
        """An owner's saved codes, newest first."""
        result = await self.session.execute(
            select(SavedCode)
            .where(SavedCode.user_id == user_id)
            .order_by(SavedCode.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_owned_or_none(self, id: str, user_id: str) -> SavedCode | None:
        result = await self.session.execute(
            select(SavedCode).where(SavedCode.id == str(id)).where(SavedCode.user_id == user_id)
        )
        return result.scalar_one_or_none()
