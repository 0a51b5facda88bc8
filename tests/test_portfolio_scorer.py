"""Tests for the portfolio scoring engine."""

from datetime import UTC, datetime, timedelta

import pytest

from services.portfolio_scorer import (
    CATEGORY_WEIGHTS,
    RANK_TABLE,
    PortfolioScorer,
    _description_points,
    _language_score,
    calculate_rank,
    overall_score,
)


class TestPortfolioScorer:
    """Test suite for PortfolioScorer.score."""

    def setup_method(self):
        self.scorer = PortfolioScorer()

    def test_empty_portfolio(self, now):
        result = self.scorer.score([], now=now)
        assert result.overall_score == 0
        assert result.rank == "C"
        assert result.breakdown.weaknesses == ["No projects found"]
        assert result.breakdown.suggestions
        assert (
            result.project_quality_score
            == result.tech_diversity_score
            == result.documentation_score
            == result.consistency_score
            == result.professionalism_score
            == 0
        )

    def test_strong_portfolio(self, strong_portfolio, now):
        result = self.scorer.score(strong_portfolio, has_profile_readme=True, now=now)
        assert result.project_quality_score == 100
        assert result.documentation_score == 100
        assert result.tech_diversity_score == 82
        assert result.consistency_score == 100
        assert result.professionalism_score == 100
        assert result.overall_score == 96
        assert result.rank == "S"
        assert result.has_profile_readme is True
        assert "Well-documented projects" in result.breakdown.strengths
        assert "Professional GitHub profile README" in result.breakdown.strengths
        assert result.breakdown.weaknesses == []

    def test_scores_within_bounds(self, strong_portfolio, make_project, now):
        portfolios = [
            strong_portfolio,
            [make_project()],
            [make_project(stars=10_000, forks=5_000, complexity_score=100)],
        ]
        for projects in portfolios:
            result = self.scorer.score(projects, has_profile_readme=True, now=now)
            for value in (
                result.overall_score,
                result.project_quality_score,
                result.tech_diversity_score,
                result.documentation_score,
                result.consistency_score,
                result.professionalism_score,
            ):
                assert 0 <= value <= 100

    def test_deterministic(self, strong_portfolio, now):
        results = [self.scorer.score(strong_portfolio, now=now) for _ in range(12)]
        assert all(r == results[0] for r in results)

    def test_rank_matches_overall(self, strong_portfolio, make_project, now):
        for projects in (strong_portfolio, [make_project()]):
            result = self.scorer.score(projects, now=now)
            assert result.rank == calculate_rank(result.overall_score)

    def test_camel_case_output(self, strong_portfolio, now):
        data = self.scorer.score(strong_portfolio, now=now).model_dump(by_alias=True)
        assert {"overallScore", "projectQualityScore", "hasProfileReadme"} <= set(data)
        assert "daysSinceLastCommit" in data["breakdown"]["details"]


class TestProjectQuality:
    def setup_method(self):
        self.scorer = PortfolioScorer()

    def test_no_complexity_is_zero(self, make_project, now):
        projects = [make_project("a"), make_project("b")]
        assert self.scorer.score(projects, now=now).project_quality_score == 0

    def test_missing_complexity_counts_as_zero(self, make_project, now):
        projects = [make_project("a", complexity_score=80), make_project("b")]
        assert self.scorer.score(projects, now=now).project_quality_score == 40

    def test_single_high_project_gets_no_bonus(self, make_project, now):
        projects = [make_project("a", complexity_score=90)]
        assert self.scorer.score(projects, now=now).project_quality_score == 90

    def test_bonus_for_several_high_projects(self, make_project, now):
        projects = [
            make_project("a", complexity_score=90),
            make_project("b", complexity_score=85),
        ]
        # mean 87.5 + bonus 10
        assert self.scorer.score(projects, now=now).project_quality_score == 98

    def test_bonus_capped(self, make_project, now):
        projects = [make_project(str(i), complexity_score=85) for i in range(6)]
        assert self.scorer.score(projects, now=now).project_quality_score == 100


class TestTechDiversity:
    @pytest.mark.parametrize(
        ("count", "expected"),
        [(0, 0), (1, 30), (2, 40), (3, 50), (5, 70), (6, 74), (10, 90), (11, 92), (15, 100), (40, 100)],
    )
    def test_language_curve(self, count, expected):
        assert _language_score(count) == expected

    def test_monotonic(self):
        scores = [_language_score(n) for n in range(30)]
        assert scores == sorted(scores)

    def test_distinct_languages_across_projects(self, make_project, now):
        projects = [
            make_project("a", languages={"Python": 1, "Go": 2}),
            make_project("b", languages={"Python": 5}),
        ]
        result = PortfolioScorer().score(projects, now=now)
        assert result.tech_diversity_score == 40
        assert result.breakdown.details.languages == ["Python", "Go"]


class TestDocumentation:
    def setup_method(self):
        self.scorer = PortfolioScorer()

    @pytest.mark.parametrize(
        ("length", "points"),
        [(0, 0), (1, 20), (10, 20), (11, 50), (50, 50), (51, 75), (100, 75), (101, 100)],
    )
    def test_description_tiers(self, length, points):
        assert _description_points("x" * length) == points

    def test_no_description(self, make_project, now):
        result = self.scorer.score([make_project()], now=now)
        assert result.documentation_score == 0

    def test_profile_readme_bonus(self, make_project, now):
        without = self.scorer.score([make_project(description="short")], now=now)
        with_readme = self.scorer.score(
            [make_project(description="short")], has_profile_readme=True, now=now
        )
        assert without.documentation_score == 16
        assert with_readme.documentation_score == 26
        assert with_readme.documentation_score >= without.documentation_score

    def test_visual_demo_share(self, make_project, now):
        result = self.scorer.score([make_project(description="demo")], now=now)
        assert result.documentation_score == 36


class TestConsistency:
    def setup_method(self):
        self.scorer = PortfolioScorer()

    def test_no_dates(self, make_project, now):
        result = self.scorer.score([make_project()], now=now)
        assert result.consistency_score == 0
        assert result.breakdown.details.days_since_last_commit is None

    def test_commit_today(self, make_project, now):
        result = self.scorer.score([make_project(last_commit_date=now)], now=now)
        assert result.consistency_score == 100
        assert result.breakdown.details.days_since_last_commit == 0

    def test_half_life(self, make_project, now):
        project = make_project(last_commit_date=now - timedelta(days=30))
        # 0.6 * 50 + 0.4 * 100
        assert self.scorer.score([project], now=now).consistency_score == 70

    def test_stale_project(self, make_project, now):
        project = make_project(last_commit_date=now - timedelta(days=120))
        # 0.6 * 6.25 + 0
        assert self.scorer.score([project], now=now).consistency_score == 4

    def test_naive_dates_are_utc(self, make_project, now):
        naive = now.replace(tzinfo=None)
        result = self.scorer.score([make_project(last_commit_date=naive)], now=now)
        assert result.consistency_score == 100

    def test_non_increasing_as_time_passes(self, make_project, now):
        projects = [
            make_project("a", last_commit_date=now - timedelta(days=3)),
            make_project("b", last_commit_date=now - timedelta(days=70)),
        ]
        scores = [
            self.scorer.score(projects, now=now + timedelta(days=d)).consistency_score
            for d in range(0, 200, 10)
        ]
        assert scores == sorted(scores, reverse=True)

    def test_default_now_reads_clock(self, make_project):
        project = make_project(last_commit_date=datetime.now(UTC))
        assert self.scorer.score([project]).consistency_score >= 99


class TestProfessionalism:
    def test_minimal_project(self, make_project, now):
        result = PortfolioScorer().score([make_project()], now=now)
        # engagement 10, organization 0
        assert result.professionalism_score == 5

    def test_engagement_saturates(self, make_project, now):
        projects = [
            make_project(str(i), description="A" * 40, stars=500, forks=100) for i in range(6)
        ]
        assert PortfolioScorer().score(projects, now=now).professionalism_score == 100


class TestRank:
    @pytest.mark.parametrize(
        ("score", "rank"),
        [
            (100, "S"),
            (95, "S"),
            (94.9, "A+"),
            (87.5, "A+"),
            (87.4, "A"),
            (75, "A"),
            (62.5, "A-"),
            (50, "B+"),
            (37.5, "B"),
            (25, "B-"),
            (12.5, "C+"),
            (12.4, "C"),
            (0, "C"),
        ],
    )
    def test_cut_points(self, score, rank):
        assert calculate_rank(score) == rank

    def test_table_descending(self):
        cuts = [cut for cut, _ in RANK_TABLE]
        assert cuts == sorted(cuts, reverse=True)

    def test_weights_sum_to_one(self):
        assert sum(CATEGORY_WEIGHTS.values()) == 1


class TestOverallScore:
    def test_exact_half_rounds_up(self):
        """95, 91, 39, 89, 21 weigh in at exactly 74.5."""
        scores = {
            "project_quality": 95,
            "documentation": 91,
            "tech_diversity": 39,
            "consistency": 89,
            "professionalism": 21,
        }
        assert overall_score(scores) == 75
        assert calculate_rank(overall_score(scores)) == "A"

    def test_all_hundred(self):
        assert overall_score(dict.fromkeys(CATEGORY_WEIGHTS, 100)) == 100


class TestFeedback:
    def setup_method(self):
        self.scorer = PortfolioScorer()

    def test_suggestions_capped_at_five(self, make_project, now):
        result = self.scorer.score([make_project()], now=now)
        assert len(result.breakdown.suggestions) == 5
        assert "Inconsistent development activity" in result.breakdown.weaknesses

    def test_readme_suggestion(self, make_project, now):
        result = self.scorer.score([make_project(last_commit_date=now)], now=now)
        assert any("profile README" in s for s in result.breakdown.suggestions)

    def test_suggestions_never_empty_below_70(self, make_project, now):
        """Mid-range scores with nothing specific to fix still get advice."""
        projects = [
            make_project(
                str(i),
                description="x" * 40,
                languages={lang: 1},
                complexity_score=60,
                last_commit_date=now - timedelta(days=30),
            )
            for i, lang in enumerate(["Python", "Go", "Rust"])
        ]
        result = self.scorer.score(projects, has_profile_readme=True, now=now)
        assert result.overall_score < 70
        assert result.breakdown.weaknesses == []
        assert len(result.breakdown.suggestions) == 1

    def test_large_portfolio_strength(self, make_project, now):
        projects = [make_project(str(i)) for i in range(10)]
        result = self.scorer.score(projects, now=now)
        assert "Impressive portfolio with 10 projects" in result.breakdown.strengths
