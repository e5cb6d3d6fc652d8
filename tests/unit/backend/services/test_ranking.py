"""
Unit Tests for the Rating and Ranking functions.

Pure functions, no mocks.
"""

import math
from types import SimpleNamespace

import pytest

from studyshare.backend.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ValidationError,
)
from studyshare.backend.services.ranking import (
    RatingEntry,
    RatingSnapshot,
    apply_rating,
    check_rating,
    coerce_rating_value,
    compute_leaderboard,
    mean_rating,
)


def snapshot(uploader: str = "uploader", *values: tuple[str, float]) -> RatingSnapshot:
    return RatingSnapshot(
        uploader_id=uploader,
        ratings=tuple(RatingEntry(user_id=u, value=v) for u, v in values),
    )


def note(uploader: str, downloads: int | None, rating: float, removed: bool = False) -> SimpleNamespace:
    return SimpleNamespace(uploaded_by=uploader, downloads=downloads, rating=rating, removed=removed)


class TestMeanRating:
    def test_empty_is_zero(self):
        assert mean_rating([]) == 0.0

    def test_plain_mean(self):
        assert mean_rating([3, 4, 5]) == 4.0

    def test_keeps_full_precision(self):
        assert mean_rating([4, 5, 5]) == pytest.approx(14 / 3)


class TestApplyRating:
    def test_appends_and_recomputes(self):
        """Value 5 on ratings [3, 4] gives mean 4.0 over 3 ratings."""
        before = snapshot("alice", ("u1", 3), ("u2", 4))

        after = apply_rating(before, "u3", 5)

        assert after.rating == 4.0
        assert after.rating_count == 3
        assert after.has_rated("u3")

    def test_does_not_mutate_input(self):
        before = snapshot("alice", ("u1", 3))

        apply_rating(before, "u2", 5)

        assert before.rating_count == 1

    def test_first_rating_sets_mean(self):
        after = apply_rating(snapshot("alice"), "bob", 2)
        assert after.rating == 2.0
        assert after.rating_count == 1


class TestCheckRating:
    def test_rejects_anonymous(self):
        with pytest.raises(AuthenticationError) as exc_info:
            check_rating(snapshot("alice"), None, 4)
        assert exc_info.value.message == "Login required"

    @pytest.mark.parametrize("value", [1, 3, 5, 0, 100])
    def test_rejects_self_rating_regardless_of_value(self, value):
        with pytest.raises(AuthorizationError) as exc_info:
            check_rating(snapshot("alice"), "alice", value)
        assert exc_info.value.message == "You cannot rate your own note"

    def test_rejects_second_rating(self):
        with pytest.raises(ConflictError) as exc_info:
            check_rating(snapshot("alice", ("bob", 4)), "bob", 5)
        assert exc_info.value.message == "You already rated this note"

    @pytest.mark.parametrize("value", [0, 6, -1, 5.5])
    def test_rejects_out_of_range(self, value):
        with pytest.raises(ValidationError):
            check_rating(snapshot("alice"), "bob", value)

    def test_accepts_bounds(self):
        check_rating(snapshot("alice"), "bob", 1)
        check_rating(snapshot("alice"), "bob", 5)

    def test_checks_self_before_range(self):
        """Self-rating is reported even when the value is also out of range."""
        with pytest.raises(AuthorizationError):
            check_rating(snapshot("alice"), "alice", 9)

    def test_checks_duplicate_before_range(self):
        with pytest.raises(ConflictError):
            check_rating(snapshot("alice", ("bob", 4)), "bob", 9)

    @pytest.mark.parametrize("raw", [None, "", "abc"])
    def test_checks_self_before_parsing(self, raw):
        with pytest.raises(AuthorizationError):
            check_rating(snapshot("alice"), "alice", raw)

    def test_checks_duplicate_before_parsing(self):
        with pytest.raises(ConflictError):
            check_rating(snapshot("alice", ("bob", 4)), "bob", "x")

    def test_returns_parsed_value(self):
        assert check_rating(snapshot("alice"), "bob", "4") == 4.0

    def test_note_without_uploader_id_can_be_rated(self):
        check_rating(snapshot(""), "bob", 3)


class TestCoerceRatingValue:
    @pytest.mark.parametrize("raw,expected", [(4, 4.0), ("3", 3.0), (" 2.5 ", 2.5), (1.0, 1.0)])
    def test_parses_numbers(self, raw, expected):
        assert coerce_rating_value(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", True, [], {}])
    def test_rejects_non_numbers(self, raw):
        with pytest.raises(ValidationError):
            coerce_rating_value(raw)

    @pytest.mark.parametrize("raw", ["nan", "inf", math.inf])
    def test_rejects_non_finite(self, raw):
        with pytest.raises(ValidationError):
            coerce_rating_value(raw)


class TestComputeLeaderboard:
    def test_orders_by_downloads(self):
        """bob (20 downloads) ranks above alice (10 downloads)."""
        notes = [note("alice", 10, 4.0), note("bob", 20, 3.5)]

        board = compute_leaderboard(notes)

        assert [e.uploader for e in board] == ["bob", "alice"]

    def test_ties_broken_by_average_rating(self):
        notes = [note("alice", 10, 3.0), note("bob", 10, 4.5)]

        board = compute_leaderboard(notes)

        assert [e.uploader for e in board] == ["bob", "alice"]

    def test_groups_by_uploader(self):
        notes = [note("alice", 3, 4.0), note("alice", 2, 2.0), note("bob", 1, 5.0)]

        board = compute_leaderboard(notes)

        alice = board[0]
        assert alice.uploader == "alice"
        assert alice.total_notes == 2
        assert alice.total_downloads == 5
        assert alice.avg_rating == 3.0

    def test_missing_downloads_count_as_zero(self):
        board = compute_leaderboard([note("alice", None, 4.0), note("alice", 2, 4.0)])
        assert board[0].total_downloads == 2

    def test_ignores_removed_notes(self):
        notes = [note("alice", 100, 5.0, removed=True), note("bob", 1, 1.0)]

        board = compute_leaderboard(notes)

        assert [e.uploader for e in board] == ["bob"]

    def test_limits_to_five(self):
        notes = [note(f"user{i}", i, 3.0) for i in range(8)]

        board = compute_leaderboard(notes)

        assert len(board) == 5
        assert board[0].uploader == "user7"

    def test_empty(self):
        assert compute_leaderboard([]) == []

    def test_json_shape(self):
        entry = compute_leaderboard([note("alice", 4, 3.5)])[0]

        assert entry.to_json() == {
            "_id": "alice",
            "uploader": "alice",
            "totalNotes": 1,
            "totalDownloads": 4,
            "avgRating": 3.5,
        }
