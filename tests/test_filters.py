"""Tests for recommendation filtering and sorting."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import ValidationError
from app.models import (
    Category,
    Difficulty,
    FilterState,
    Priority,
    SortKey,
    TimeBucket,
)
from services.filters import (
    DIFFICULTY_ORDER,
    SORTS,
    TIME_ORDER,
    apply_filters,
    categorize_time_estimate,
    filter_and_sort,
    sort_recommendations,
)


class TestCategorizeTimeEstimate:
    @pytest.mark.parametrize(
        ("text", "bucket"),
        [
            ("Weekend project", TimeBucket.WEEKEND),
            ("4-8 hours", TimeBucket.WEEKEND),
            ("8-16 hours", TimeBucket.WEEKEND),
            ("2-4 hours", TimeBucket.WEEKEND),
            ("3 hours", TimeBucket.WEEKEND),
            ("16-24 hours", TimeBucket.WEEK),
            ("20-30 hours", TimeBucket.WEEK),
            ("A few hours", TimeBucket.WEEKEND),
            ("1-2 days", TimeBucket.WEEKEND),
            ("1 week", TimeBucket.WEEK),
            ("3-5 days", TimeBucket.WEEK),
            ("5-10 days", TimeBucket.WEEK),
            ("1-3 days", TimeBucket.WEEK),
            ("2-3 weeks", TimeBucket.EXTENDED),
            ("1-2 weeks", TimeBucket.EXTENDED),
            ("1 month", TimeBucket.EXTENDED),
            ("40+ hours", TimeBucket.EXTENDED),
            ("", TimeBucket.EXTENDED),
            ("whenever", TimeBucket.EXTENDED),
        ],
    )
    def test_buckets(self, text, bucket):
        assert categorize_time_estimate(text) == bucket

    def test_case_insensitive(self):
        assert categorize_time_estimate("WEEKEND") == TimeBucket.WEEKEND


class TestOrdinalTables:
    """Every enum member has an ordinal; new members must be added here."""

    def test_difficulty_order_exhaustive(self):
        assert set(DIFFICULTY_ORDER) == set(Difficulty)

    def test_time_order_exhaustive(self):
        assert set(TIME_ORDER) == set(TimeBucket)

    def test_every_sort_key_has_a_sort(self):
        assert set(SORTS) == set(SortKey)


class TestApplyFilters:
    """Test suite for apply_filters."""

    @pytest.fixture
    def items(self, make_recommendation):
        return [
            make_recommendation(
                "a",
                difficulty=Difficulty.BEGINNER,
                category=Category.FRONTEND,
                time_estimate="Weekend project",
                skills_taught=["React", "CSS"],
                priority=Priority.HIGH,
                priority_score=25,
            ),
            make_recommendation(
                "b",
                difficulty=Difficulty.BEGINNER,
                category=Category.BACKEND,
                time_estimate="1 week",
                skills_taught=["Node.js", "PostgreSQL"],
                priority=Priority.MEDIUM,
                priority_score=12,
            ),
            make_recommendation(
                "c",
                difficulty=Difficulty.ADVANCED,
                category=Category.FRONTEND,
                time_estimate="1 month",
                skills_taught=["React Native", "TypeScript"],
                priority=Priority.LOW,
                priority_score=1,
            ),
        ]

    def test_wildcards_keep_everything(self, items):
        state = FilterState(
            difficulty="all", category="all", time_commitment="all", priority_level="all"
        )
        assert apply_filters(items, state) == items

    def test_default_state_keeps_everything(self, items):
        assert apply_filters(items, FilterState()) == items

    def test_and_of_predicates(self, items):
        """Beginner AND frontend leaves exactly one of three."""
        state = FilterState(difficulty="beginner", category="frontend")
        assert [i.id for i in apply_filters(items, state)] == ["a"]

    def test_time_commitment(self, items):
        state = FilterState(time_commitment=TimeBucket.EXTENDED)
        assert [i.id for i in apply_filters(items, state)] == ["c"]

    def test_skills_any_of_substring(self, items):
        state = FilterState(skills=["react"])
        assert [i.id for i in apply_filters(items, state)] == ["a", "c"]

    def test_skills_any_of_multiple(self, items):
        state = FilterState(skills=["postgres", "typescript"])
        assert [i.id for i in apply_filters(items, state)] == ["b", "c"]

    def test_priority_level(self, items):
        state = FilterState(priority_level="medium")
        assert [i.id for i in apply_filters(items, state)] == ["b"]

    def test_result_is_subset_in_order(self, items):
        state = FilterState(category="frontend")
        result = apply_filters(items, state)
        assert [i.id for i in result] == ["a", "c"]
        assert all(i in items for i in result)

    def test_no_match(self, items):
        state = FilterState(difficulty="intermediate")
        assert apply_filters(items, state) == []

    def test_invalid_filter_value_rejected(self):
        with pytest.raises(PydanticValidationError):
            FilterState(difficulty="expert")


class TestSortRecommendations:
    """Test suite for sort_recommendations."""

    @pytest.fixture
    def items(self, make_recommendation):
        return [
            make_recommendation(
                "mid",
                difficulty=Difficulty.INTERMEDIATE,
                time_estimate="1 week",
                skills_taught=["A", "B"],
                priority_score=10,
            ),
            make_recommendation(
                "hard",
                difficulty=Difficulty.ADVANCED,
                time_estimate="2-3 weeks",
                skills_taught=["A", "B", "C"],
                priority_score=30,
            ),
            make_recommendation(
                "easy",
                difficulty=Difficulty.BEGINNER,
                time_estimate="Weekend",
                skills_taught=["A"],
                priority_score=10,
            ),
        ]

    def test_priority_descending_stable(self, items):
        result = sort_recommendations(items, SortKey.PRIORITY)
        assert [i.id for i in result] == ["hard", "mid", "easy"]

    def test_priority_ascending_override(self, items):
        result = sort_recommendations(items, "priority", ascending=True)
        assert [i.id for i in result] == ["mid", "easy", "hard"]

    def test_difficulty_ascending(self, items):
        result = sort_recommendations(items, SortKey.DIFFICULTY)
        assert [i.id for i in result] == ["easy", "mid", "hard"]

    def test_difficulty_descending_override(self, items):
        result = sort_recommendations(items, SortKey.DIFFICULTY, ascending=False)
        assert [i.id for i in result] == ["hard", "mid", "easy"]

    def test_time_ascending(self, items):
        result = sort_recommendations(items, SortKey.TIME)
        assert [i.id for i in result] == ["easy", "mid", "hard"]

    def test_skills_descending(self, items):
        result = sort_recommendations(items, SortKey.SKILLS)
        assert [i.id for i in result] == ["hard", "mid", "easy"]

    def test_non_mutating(self, items):
        before = [i.id for i in items]
        result = sort_recommendations(items, SortKey.DIFFICULTY)
        assert [i.id for i in items] == before
        assert result is not items

    def test_unknown_sort_key(self, items):
        with pytest.raises(ValidationError) as exc_info:
            sort_recommendations(items, "popularity")
        assert exc_info.value.status_code == 422
        assert "priority" in exc_info.value.details["allowed"]

    def test_empty_list(self):
        assert sort_recommendations([], SortKey.TIME) == []


class TestFilterAndSort:
    def test_filters_then_sorts(self, make_recommendation):
        items = [
            make_recommendation("x", category=Category.DEVOPS, priority_score=5),
            make_recommendation("y", category=Category.FRONTEND, priority_score=3),
            make_recommendation("z", category=Category.DEVOPS, priority_score=9),
        ]
        state = FilterState(category="devops", sort_by="priority")
        assert [i.id for i in filter_and_sort(items, state)] == ["z", "x"]
