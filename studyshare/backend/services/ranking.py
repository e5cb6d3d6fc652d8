"""
Rating and Ranking.

Pure functions over note data: rating submission checks, the aggregate
mean, and the uploader leaderboard. Nothing here touches the database;
NoteService feeds it snapshots and stored rows.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Protocol

from studyshare.backend.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ValidationError,
)

DEFAULT_MIN_RATING = 1.0
DEFAULT_MAX_RATING = 5.0
DEFAULT_LEADERBOARD_SIZE = 5


@dataclass(frozen=True)
class RatingEntry:
    user_id: str
    value: float


@dataclass(frozen=True)
class RatingSnapshot:
    """The parts of a note that a rating submission reads and changes."""

    uploader_id: str
    ratings: tuple[RatingEntry, ...] = field(default_factory=tuple)

    @property
    def rating_count(self) -> int:
        return len(self.ratings)

    @property
    def rating(self) -> float:
        return mean_rating(entry.value for entry in self.ratings)

    def has_rated(self, user_id: str) -> bool:
        return any(entry.user_id == user_id for entry in self.ratings)


def mean_rating(values: Iterable[float]) -> float:
    """Plain arithmetic mean; 0.0 when there are no values."""
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def coerce_rating_value(raw: Any) -> float:
    """
    Parse a submitted rating into a finite float.

    Raises:
        ValidationError: If the value is missing, not numeric, NaN or infinite
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()) or isinstance(raw, bool):
        raise ValidationError("Rating is required", details={"rating": "missing"})
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValidationError("Rating must be a number", details={"rating": str(raw)})
    if not math.isfinite(value):
        raise ValidationError("Rating must be a number", details={"rating": str(raw)})
    return value


def check_rating(
    snapshot: RatingSnapshot,
    user_id: str | None,
    value: Any,
    min_value: float = DEFAULT_MIN_RATING,
    max_value: float = DEFAULT_MAX_RATING,
) -> float:
    """
    Validate a rating submission against a note and return the parsed value.

    Checks run in this order: authentication, self-rating, duplicate
    rating, value. The raw value is only parsed once the submitter is
    allowed to rate.

    Raises:
        AuthenticationError: No user is signed in
        AuthorizationError: The user uploaded the note
        ConflictError: The user already rated the note
        ValidationError: The value is not a number in [min_value, max_value]
    """
    if not user_id:
        raise AuthenticationError("Login required")
    if snapshot.uploader_id and snapshot.uploader_id == user_id:
        raise AuthorizationError("You cannot rate your own note")
    if snapshot.has_rated(user_id):
        raise ConflictError("You already rated this note")
    value = coerce_rating_value(value)
    if not min_value <= value <= max_value:
        raise ValidationError(
            f"Rating must be between {min_value:g} and {max_value:g}",
            details={"rating": value},
        )
    return value


def apply_rating(
    snapshot: RatingSnapshot,
    user_id: str | None,
    value: Any,
    min_value: float = DEFAULT_MIN_RATING,
    max_value: float = DEFAULT_MAX_RATING,
) -> RatingSnapshot:
    """Return the snapshot with the rating appended, or raise as check_rating does."""
    value = check_rating(snapshot, user_id, value, min_value, max_value)
    return RatingSnapshot(
        uploader_id=snapshot.uploader_id,
        ratings=snapshot.ratings + (RatingEntry(user_id=user_id, value=value),),
    )


# =============================================================================
# Leaderboard
# =============================================================================


class RankableNote(Protocol):
    uploaded_by: str
    downloads: int | None
    rating: float
    removed: bool


@dataclass(frozen=True)
class LeaderboardEntry:
    uploader: str
    total_notes: int
    total_downloads: int
    avg_rating: float

    def to_json(self) -> dict[str, Any]:
        """Wire shape of the /api/leaderboard items."""
        return {
            "_id": self.uploader,
            "uploader": self.uploader,
            "totalNotes": self.total_notes,
            "totalDownloads": self.total_downloads,
            "avgRating": self.avg_rating,
        }


def compute_leaderboard(
    notes: Iterable[RankableNote],
    limit: int = DEFAULT_LEADERBOARD_SIZE,
) -> list[LeaderboardEntry]:
    """
    Rank uploaders by total downloads, then by mean note rating.

    Removed notes are ignored. Missing download counts count as zero.
    """
    groups: dict[str, list[RankableNote]] = {}
    for note in notes:
        if note.removed:
            continue
        groups.setdefault(note.uploaded_by, []).append(note)

    entries = [
        LeaderboardEntry(
            uploader=uploader,
            total_notes=len(group),
            total_downloads=sum(note.downloads or 0 for note in group),
            avg_rating=mean_rating(note.rating or 0.0 for note in group),
        )
        for uploader, group in groups.items()
    ]
    entries.sort(key=lambda e: (-e.total_downloads, -e.avg_rating))
    return entries[:limit]
