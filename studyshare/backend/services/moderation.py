"""
Moderation.

Approval/removal lifecycle of a note and the admin-facing service around it.

    pending ──approve──▶ approved
       │                    │
       └──────remove────────┴──▶ removed (terminal)

Removal is idempotent and has no way back. Only removal is reachable from
the admin routes; `approve` is available here for a future admin action.
"""

from dataclasses import dataclass
from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession

from studyshare.backend.core.config import get_app_config
from studyshare.backend.core.exceptions import ConflictError
from studyshare.backend.models.note import Note
from studyshare.backend.repositories.note import NoteRepository
from studyshare.backend.services.base import BaseService


class NoteState(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REMOVED = "removed"


class ModerationAction(str, Enum):
    APPROVE = "approve"
    REMOVE = "remove"


def state_of(approved: bool, removed: bool) -> NoteState:
    """Map a note's flags to its lifecycle state."""
    if removed:
        return NoteState.REMOVED
    if approved:
        return NoteState.APPROVED
    return NoteState.PENDING


def transition(state: NoteState, action: ModerationAction) -> NoteState:
    """
    Next state after an action.

    Raises:
        ConflictError: Approving a removed note
    """
    if action is ModerationAction.REMOVE:
        return NoteState.REMOVED
    if state is NoteState.REMOVED:
        raise ConflictError("Removed notes cannot be approved")
    return NoteState.APPROVED


def flags_for(state: NoteState) -> dict[str, bool]:
    """Column values that represent a state."""
    return {
        "approved": state is NoteState.APPROVED,
        "removed": state is NoteState.REMOVED,
    }


@dataclass(frozen=True)
class DashboardCounts:
    total: int
    approved: int
    pending: int
    removed: int


@dataclass(frozen=True)
class Reports:
    top_rated: list[Note]
    most_downloaded: list[Note]


class ModerationService(BaseService):
    """Admin views over the full note set, removed notes included."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)

    async def _apply(self, note_id: str, action: ModerationAction) -> Note:
        note = await self.repo.get_by_id(note_id)
        current = state_of(note.approved, note.removed)
        target = transition(current, action)

        self._log_operation(
            "Moderating note",
            note_id=note_id,
            action=action.value,
            from_state=current.value,
            to_state=target.value,
        )

        if target is current:
            return note

        updates = flags_for(target)
        if target is NoteState.REMOVED:
            # Approval history is kept on removal
            updates["approved"] = note.approved
        return await self._execute_db_operation(
            "moderate_note",
            self.repo.update(note_id, **updates),
        )

    async def remove_note(self, note_id: str) -> Note:
        """Soft-delete a note. Removing an already removed note is a no-op."""
        return await self._apply(note_id, ModerationAction.REMOVE)

    async def approve_note(self, note_id: str) -> Note:
        """Mark a pending note approved."""
        return await self._apply(note_id, ModerationAction.APPROVE)

    async def dashboard_counts(self) -> DashboardCounts:
        return DashboardCounts(
            total=await self.repo.count(),
            approved=await self.repo.count(approved=True),
            pending=await self.repo.count(approved=False),
            removed=await self.repo.count(removed=True),
        )

    async def all_notes(self) -> list[Note]:
        """Every note, newest first."""
        return await self.repo.list_all()

    async def search(self, query: str | None) -> list[Note]:
        """Case-insensitive match on title, subject or uploader name."""
        self._log_debug("Admin search", query=query)
        return await self.repo.search_any(query or "")

    async def reports(self) -> Reports:
        size = get_app_config().application.listings.report_size
        return Reports(
            top_rated=await self.repo.top_by("rating", size),
            most_downloaded=await self.repo.top_by("downloads", size),
        )
