"""Tests for the FeatureComparator."""

from datetime import date

import pytest


def _requirement(text, **kwargs):
    from fitmatch.job.models import JobRequirement

    return JobRequirement(text=text, **kwargs)


class TestCompareSkill:
    """Test skill comparisons."""

    def test_expert_skill_scores_one(self, matching_config, python_expert, today):
        """A matching expert skill satisfies the requirement fully."""
        from fitmatch.matching.comparator import FeatureComparator

        result = FeatureComparator(matching_config).compare(
            _requirement("Python required"), python_expert, today=today
        )

        assert result.score == 1.0
        assert result.satisfied is True
        assert "Python" in result.rationale

    @pytest.mark.parametrize(
        ("level", "expected"),
        [("beginner", 0.4), ("intermediate", 0.6), ("advanced", 0.8), ("expert", 1.0)],
    )
    def test_score_follows_proficiency(self, matching_config, make_profile, level, expected):
        """Score is the proficiency mapping of the matched skill."""
        from fitmatch.matching.comparator import FeatureComparator

        profile = make_profile(skills=[{"name": "Python", "proficiency_level": level}])

        result = FeatureComparator(matching_config).compare(_requirement("Python"), profile)

        assert result.score == expected
        assert result.satisfied is (expected >= 0.6)

    def test_alias_matches(self, matching_config, make_profile):
        """Skill aliases are resolved before comparing."""
        from fitmatch.matching.comparator import FeatureComparator

        profile = make_profile(skills=[{"name": "JS", "proficiency_level": "advanced"}])

        result = FeatureComparator(matching_config).compare(
            _requirement("Strong JavaScript skills"), profile
        )

        assert result.score == 0.8

    def test_versioned_skill_name_matches_plain_requirement(self, matching_config, make_profile):
        """A profile skill with a version suffix covers the bare skill."""
        from fitmatch.matching.comparator import FeatureComparator

        profile = make_profile(skills=[{"name": "Python 3.11", "proficiency_level": "expert"}])

        result = FeatureComparator(matching_config).compare(_requirement("Python"), profile)

        assert result.score == 1.0
        assert "Python 3.11" in result.rationale

    def test_best_matching_skill_wins(self, matching_config, make_profile):
        """With duplicate entries the highest proficiency counts."""
        from fitmatch.matching.comparator import FeatureComparator

        profile = make_profile(
            skills=[
                {"name": "Postgres", "proficiency_level": "beginner"},
                {"name": "PostgreSQL", "proficiency_level": "expert"},
            ]
        )

        result = FeatureComparator(matching_config).compare(
            _requirement("PostgreSQL required"), profile
        )

        assert result.score == 1.0

    def test_skill_only_in_work_history(self, matching_config, python_expert, today):
        """Skills named only in skills_used count as beginner evidence."""
        from fitmatch.matching.comparator import FeatureComparator

        result = FeatureComparator(matching_config).compare(
            _requirement("Django"), python_expert, today=today
        )

        assert result.score == 0.4
        assert result.satisfied is False

    def test_missing_skill_scores_zero(self, matching_config, python_expert, today):
        """An absent skill scores 0."""
        from fitmatch.matching.comparator import FeatureComparator

        result = FeatureComparator(matching_config).compare(
            _requirement("Go required"), python_expert, today=today
        )

        assert result.score == 0.0
        assert result.satisfied is False

    def test_empty_profile_does_not_raise(self, matching_config, make_profile):
        """Missing profile sections score 0 rather than failing."""
        from fitmatch.matching.comparator import FeatureComparator

        result = FeatureComparator(matching_config).compare(_requirement("Python"), make_profile())

        assert result.score == 0.0


class TestCompareExperience:
    """Test experience comparisons."""

    def test_enough_relevant_years(self, matching_config, python_expert, today):
        """Five years of Python work satisfies a three year requirement."""
        from fitmatch.matching.comparator import FeatureComparator

        result = FeatureComparator(matching_config).compare(
            _requirement("3+ years of Python experience"), python_expert, today=today
        )

        assert result.score == 1.0
        assert result.satisfied is True

    def test_partial_years(self, matching_config, make_profile, today):
        """Score is the ratio of actual to required years."""
        from fitmatch.matching.comparator import FeatureComparator

        profile = make_profile(
            work_experience=[
                {
                    "title": "Python Developer",
                    "company": "Initech",
                    "start_date": "2022-06-01",
                    "end_date": "2024-06-01",
                }
            ]
        )

        result = FeatureComparator(matching_config).compare(
            _requirement("4 years of Python experience"), profile, today=today
        )

        assert result.score == pytest.approx(0.5, abs=0.01)
        assert result.satisfied is False

    def test_unrelated_roles_do_not_count(self, matching_config, python_expert, today):
        """Roles not mentioning the requirement's domain contribute nothing."""
        from fitmatch.matching.comparator import FeatureComparator

        result = FeatureComparator(matching_config).compare(
            _requirement("5+ years of Java experience"), python_expert, today=today
        )

        assert result.score == 0.0

    def test_generic_years_use_all_roles(self, matching_config, python_expert, today):
        """Without domain keywords every role counts."""
        from fitmatch.matching.comparator import FeatureComparator

        result = FeatureComparator(matching_config).compare(
            _requirement("At least 10 years of commercial experience"),
            python_expert,
            today=today,
        )

        assert result.score == pytest.approx(0.5, abs=0.01)

    def test_no_work_history(self, matching_config, make_profile, today):
        """A profile without roles scores 0."""
        from fitmatch.matching.comparator import FeatureComparator

        result = FeatureComparator(matching_config).compare(
            _requirement("3+ years of experience"), make_profile(), today=today
        )

        assert result.score == 0.0

    def test_malformed_date_range_raises(self, matching_config, make_profile, today):
        """A role that ends before it starts is an internal error."""
        from fitmatch.matching.comparator import FeatureComparator

        profile = make_profile(
            work_experience=[
                {
                    "title": "Developer",
                    "company": "Initech",
                    "start_date": "2022-01-01",
                    "end_date": "2021-01-01",
                }
            ]
        )

        with pytest.raises(ValueError, match="ends"):
            FeatureComparator(matching_config).compare(
                _requirement("3+ years of experience"), profile, today=today
            )


class TestExperienceHelpers:
    """Test parse_required_years and total_years."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("3+ years of Python", 3.0),
            ("at least 5 years", 5.0),
            ("от 3 лет", 3.0),
            ("2-4 years of backend work", 2.0),
            ("two years in a similar role", 2.0),
            ("Senior engineer", 5.0),
            ("Lead data engineer", 6.0),
            ("Ability to lead a small team", None),
            ("Staff meetings every week", None),
            ("Python", None),
        ],
    )
    def test_parse_required_years(self, text, expected):
        """Years are parsed from numbers, ranges, words and seniority."""
        from fitmatch.matching.comparator import parse_required_years

        assert parse_required_years(text) == expected

    def test_total_years_merges_overlaps(self, make_profile):
        """Concurrent roles are not double counted."""
        from fitmatch.matching.comparator import total_years

        profile = make_profile(
            work_experience=[
                {
                    "title": "A",
                    "company": "X",
                    "start_date": "2020-01-01",
                    "end_date": "2022-01-01",
                },
                {
                    "title": "B",
                    "company": "Y",
                    "start_date": "2021-01-01",
                    "end_date": "2023-01-01",
                },
            ]
        )

        assert total_years(profile.work_experience, date(2024, 1, 1)) == pytest.approx(
            3.0, abs=0.01
        )

    def test_total_years_open_role_ends_today(self, make_profile):
        """An open-ended role runs until the reference date."""
        from fitmatch.matching.comparator import total_years

        profile = make_profile(
            work_experience=[
                {"title": "A", "company": "X", "start_date": "2022-01-01"},
            ]
        )

        assert total_years(profile.work_experience, date(2023, 1, 1)) == pytest.approx(
            1.0, abs=0.01
        )


class TestCompareEducation:
    """Test education comparisons."""

    def test_level_and_field_met(self, matching_config, python_expert):
        """A bachelor in Computer Science meets the same requirement."""
        from fitmatch.matching.comparator import FeatureComparator

        result = FeatureComparator(matching_config).compare(
            _requirement("Bachelor's degree in Computer Science"), python_expert
        )

        assert result.score == 1.0

    def test_field_matches_below_level(self, matching_config, python_expert):
        """Right field at a lower level is a partial match."""
        from fitmatch.matching.comparator import FeatureComparator

        result = FeatureComparator(matching_config).compare(
            _requirement("Master's degree in Computer Science"), python_expert
        )

        assert result.score == 0.5

    def test_level_met_in_other_field(self, matching_config, make_profile):
        """Right level in another field is a partial match."""
        from fitmatch.matching.comparator import FeatureComparator

        profile = make_profile(
            education=[
                {"institution": "U", "degree": "Bachelor of Arts", "field": "History"}
            ]
        )

        result = FeatureComparator(matching_config).compare(
            _requirement("Bachelor's degree in Computer Science"), profile
        )

        assert result.score == 0.5

    def test_level_only_requirement(self, matching_config, make_profile):
        """Without a field, one level below is a partial match."""
        from fitmatch.matching.comparator import FeatureComparator

        profile = make_profile(
            education=[{"institution": "U", "degree": "Master of Science", "field": "Physics"}]
        )
        comparator = FeatureComparator(matching_config)

        assert comparator.compare(_requirement("PhD required"), profile).score == 0.5
        assert comparator.compare(_requirement("Master's degree"), profile).score == 1.0

    def test_abbreviated_degree_meets_bachelor(self, matching_config, make_profile):
        """A BS counts as a bachelor's degree."""
        from fitmatch.matching.comparator import FeatureComparator

        profile = make_profile(
            education=[{"institution": "U", "degree": "BS", "field": "Computer Science"}]
        )

        result = FeatureComparator(matching_config).compare(
            _requirement("Bachelor's degree required"), profile
        )

        assert result.score == 1.0
        assert result.satisfied is True

    def test_no_education(self, matching_config, make_profile):
        """No education entries score 0."""
        from fitmatch.matching.comparator import FeatureComparator

        result = FeatureComparator(matching_config).compare(
            _requirement("Bachelor's degree"), make_profile()
        )

        assert result.score == 0.0

    def test_certification(self, matching_config, make_profile):
        """Certifications satisfy certification requirements by name."""
        from fitmatch.matching.comparator import FeatureComparator

        profile = make_profile(
            certifications=[{"name": "AWS Certified Solutions Architect"}]
        )
        comparator = FeatureComparator(matching_config)

        assert comparator.compare(_requirement("AWS certification"), profile).score == 1.0
        assert comparator.compare(_requirement("Azure certification"), profile).score == 0.0


class TestEducationHelpers:
    """Test education_level / parse_required_field."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("PhD in Physics", 5),
            ("MSc", 4),
            ("MS", 4),
            ("M.Sc. in Physics", 4),
            ("MA", 4),
            ("Bachelor of Science", 3),
            ("BS", 3),
            ("BA in History", 3),
            ("B.Sc.", 3),
            ("Scrum Master", None),
            ("Mastery of SQL", None),
            ("Высшее образование", 3),
            ("Associate degree", 2),
            ("High school diploma", 1),
            ("Bootcamp", None),
        ],
    )
    def test_education_level(self, text, expected):
        """Degree keywords map to levels."""
        from fitmatch.matching.comparator import education_level

        assert education_level(text) == expected

    def test_parse_required_field(self):
        """"or related field" tails are dropped."""
        from fitmatch.matching.comparator import parse_required_field

        assert (
            parse_required_field("Bachelor's degree in Computer Science or related field")
            == "computer science"
        )
        assert parse_required_field("Bachelor's degree") is None


class TestCompareText:
    """Test soft skill and other comparisons."""

    def test_soft_skill_found_in_summary(self, matching_config, make_profile):
        """Overlap with profile free text satisfies soft skills."""
        from fitmatch.matching.comparator import FeatureComparator

        profile = make_profile(summary="Strong communicator who mentors juniors.")

        result = FeatureComparator(matching_config).compare(
            _requirement("Excellent communication skills"), profile
        )

        assert result.score == 1.0
        assert result.satisfied is True

    def test_no_overlap(self, matching_config, python_expert):
        """No shared words scores 0."""
        from fitmatch.matching.comparator import FeatureComparator

        result = FeatureComparator(matching_config).compare(
            _requirement("Willingness to travel"), python_expert
        )

        assert result.score == 0.0

    def test_requirement_without_terms(self, matching_config, python_expert):
        """Requirements made only of filler words score 0."""
        from fitmatch.matching.comparator import FeatureComparator

        result = FeatureComparator(matching_config).compare(
            _requirement("Strong skills"), python_expert
        )

        assert result.score == 0.0
        assert result.satisfied is False
