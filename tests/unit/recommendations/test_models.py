"""Tests for recommendation models."""

import pytest


def _recommendation(**overrides):
    from fitmatch.recommendations.models import Recommendation

    data = {
        "profile_id": "profile-1",
        "job_id": "job-1",
        "type": "add_skill",
        "priority": "high",
        "related_requirement": "Go required",
        "requirement_type": "skill",
        "weight": 3.0,
        "title": "Add Go",
    }
    data.update(overrides)
    return Recommendation.model_validate(data)


class TestRecommendationDefaults:
    """Test defaults."""

    def test_new_recommendation_is_pending(self):
        """Recommendations start pending with a generated id."""
        from fitmatch.recommendations.models import RecommendationStatus

        recommendation = _recommendation()

        assert recommendation.status == RecommendationStatus.PENDING
        assert recommendation.is_terminal is False
        assert recommendation.id
        assert recommendation.id != _recommendation().id

    def test_priority_rank(self):
        """High outranks medium outranks low."""
        from fitmatch.recommendations.models import Priority

        assert Priority.HIGH.rank > Priority.MEDIUM.rank > Priority.LOW.rank


class TestLifecycle:
    """Test complete / reject transitions."""

    def test_complete(self):
        """Completing returns a completed copy."""
        from fitmatch.recommendations.models import RecommendationStatus

        recommendation = _recommendation()

        completed = recommendation.complete()

        assert completed.status == RecommendationStatus.COMPLETED
        assert completed.resolved_at is not None
        assert recommendation.status == RecommendationStatus.PENDING

    def test_reject_requires_reason(self):
        """Rejecting without a reason is an invalid operation."""
        from fitmatch.errors import ErrorCode, MatchingError

        with pytest.raises(MatchingError) as exc_info:
            _recommendation().reject("   ")

        assert exc_info.value.code == ErrorCode.INVALID_OPERATION

    def test_reject_stores_reason(self):
        """The trimmed reason is kept."""
        from fitmatch.recommendations.models import RecommendationStatus

        rejected = _recommendation().reject("  Not relevant  ")

        assert rejected.status == RecommendationStatus.REJECTED
        assert rejected.rejection_reason == "Not relevant"

    @pytest.mark.parametrize("action", ["complete", "reject"])
    def test_terminal_states_are_final(self, action):
        """No transition leaves completed or rejected."""
        from fitmatch.errors import ErrorCode, MatchingError

        for terminal in (_recommendation().complete(), _recommendation().reject("No")):
            with pytest.raises(MatchingError) as exc_info:
                if action == "complete":
                    terminal.complete()
                else:
                    terminal.reject("Again")
            assert exc_info.value.code == ErrorCode.INVALID_OPERATION


class TestSerialization:
    """Test to_dict / from_dict."""

    def test_round_trip(self):
        """from_dict(to_dict()) restores the recommendation."""
        from fitmatch.recommendations.models import Recommendation

        recommendation = _recommendation().reject("No time")

        assert Recommendation.from_dict(recommendation.to_dict()) == recommendation
