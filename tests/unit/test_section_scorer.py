"""Unit tests for section scoring rules."""

import pytest

from fse_compliance.domain.services.section_scorer import SectionScorer
from fse_compliance.domain.value_objects.checklist_section import (
    ChecklistSection,
    ItemKind,
    SECTION_CATALOG,
    TOTAL_MAX_SCORE
)
from fse_compliance.domain.value_objects.rating import Rating


def all_rated(section: ChecklistSection, rating: Rating) -> dict:
    """Build answers giving every item in a section the same rating."""
    return {key: rating for key in section.definition.item_keys}


class TestSectionCatalog:
    """Test cases for the checklist catalog."""

    def test_section_maxima_sum_to_100(self):
        """Test that section maxima sum to exactly 100."""
        assert TOTAL_MAX_SCORE == 100
        assert sum(d.max_score for d in SECTION_CATALOG.values()) == 100

    @pytest.mark.parametrize("section,item_count,per_item_max,max_score", [
        (ChecklistSection.DOCUMENTATION, 4, 5, 20),
        (ChecklistSection.PERSONAL_HYGIENE, 5, 4, 20),
        (ChecklistSection.MATERIAL_SOURCING, 4, 5, 20),
        (ChecklistSection.WATER_SOURCES, 2, 5, 10),
        (ChecklistSection.WASTE_DISPOSAL, 4, 5, 20),
        (ChecklistSection.CLEANING, 2, 5, 10),
    ])
    def test_section_shapes(self, section, item_count, per_item_max, max_score):
        """Test item counts and maxima per section."""
        definition = section.definition
        assert len(definition.items) == item_count
        assert definition.per_item_max == per_item_max
        assert definition.max_score == max_score

    def test_only_documentation_is_boolean(self):
        """Test that documentation is the only boolean section."""
        boolean_sections = [s for s in ChecklistSection if s.definition.kind is ItemKind.BOOLEAN]
        assert boolean_sections == [ChecklistSection.DOCUMENTATION]

    def test_parse_unknown_section(self):
        """Test parsing an unknown section key."""
        with pytest.raises(ValueError, match="Unknown checklist section"):
            ChecklistSection.parse("kitchen")


class TestBooleanSectionScoring:
    """Test cases for documentation scoring."""

    def test_all_documents_present(self):
        """Test that four present documents score 20."""
        answers = {key: True for key in ChecklistSection.DOCUMENTATION.definition.item_keys}
        assert SectionScorer.score(ChecklistSection.DOCUMENTATION, answers) == 20

    def test_some_documents_present(self):
        """Test that each present document is worth 5."""
        answers = {"hygiene_certificate": True, "business_permit": False, "hygiene_permit": True}
        assert SectionScorer.score(ChecklistSection.DOCUMENTATION, answers) == 10

    def test_no_answers_scores_zero(self):
        """Test that missing answers count as absent."""
        assert SectionScorer.score(ChecklistSection.DOCUMENTATION, {}) == 0

    def test_boolean_item_contributes_max_or_zero(self):
        """Test boolean item points."""
        assert SectionScorer.item_points(ChecklistSection.DOCUMENTATION, True) == 5
        assert SectionScorer.item_points(ChecklistSection.DOCUMENTATION, False) == 0
        assert SectionScorer.item_points(ChecklistSection.DOCUMENTATION, None) == 0


class TestOrdinalSectionScoring:
    """Test cases for rating-based sections."""

    def test_hygiene_all_excellent(self):
        """Test that excellent earns the per-item maximum of 4."""
        answers = all_rated(ChecklistSection.PERSONAL_HYGIENE, Rating.EXCELLENT)
        assert SectionScorer.score(ChecklistSection.PERSONAL_HYGIENE, answers) == 20

    def test_hygiene_all_good_uses_fixed_points(self):
        """Test that good is a fixed 3 points, not a fraction of 4."""
        answers = all_rated(ChecklistSection.PERSONAL_HYGIENE, Rating.GOOD)
        assert SectionScorer.score(ChecklistSection.PERSONAL_HYGIENE, answers) == 15

    def test_sourcing_all_fair(self):
        """Test that fair is a fixed 2 points."""
        answers = all_rated(ChecklistSection.MATERIAL_SOURCING, Rating.FAIR)
        assert SectionScorer.score(ChecklistSection.MATERIAL_SOURCING, answers) == 8

    def test_poor_and_unset_score_zero(self):
        """Test that poor and unset items earn nothing."""
        poor = all_rated(ChecklistSection.WASTE_DISPOSAL, Rating.POOR)
        unset = all_rated(ChecklistSection.WASTE_DISPOSAL, Rating.UNSET)
        assert SectionScorer.score(ChecklistSection.WASTE_DISPOSAL, poor) == 0
        assert SectionScorer.score(ChecklistSection.WASTE_DISPOSAL, unset) == 0

    def test_mixed_water_ratings(self):
        """Test a mixed section."""
        answers = {"water_quality": Rating.EXCELLENT, "storage_conditions": Rating.GOOD}
        assert SectionScorer.score(ChecklistSection.WATER_SOURCES, answers) == 8

    def test_partially_answered_section(self):
        """Test that unanswered items silently score zero."""
        answers = {"cleaning_schedule": Rating.EXCELLENT}
        assert SectionScorer.score(ChecklistSection.CLEANING, answers) == 5

    @pytest.mark.parametrize("section", [s for s in ChecklistSection if s is not ChecklistSection.DOCUMENTATION])
    def test_item_points_domain(self, section):
        """Test that an ordinal item earns one of max, 3, 2 or 0."""
        per_item_max = section.definition.per_item_max
        points = {SectionScorer.item_points(section, rating) for rating in Rating}
        assert points == {per_item_max, 3, 2, 0}

    @pytest.mark.parametrize("rating", list(Rating))
    def test_score_within_section_bounds(self, rating):
        """Test that every uniform answer set scores within [0, section max]."""
        for section in ChecklistSection:
            if section.definition.kind is ItemKind.BOOLEAN:
                continue
            score = SectionScorer.score(section, all_rated(section, rating))
            assert 0 <= score <= section.definition.max_score


class TestScoringContract:
    """Test cases for malformed input."""

    def test_unknown_item_key_raises(self):
        """Test that an unknown item key is a contract violation."""
        with pytest.raises(KeyError, match="Unknown item 'fire_exits'"):
            SectionScorer.score(ChecklistSection.CLEANING, {"fire_exits": Rating.GOOD})

    def test_item_key_from_other_section_raises(self):
        """Test that item keys are checked per section."""
        with pytest.raises(KeyError):
            SectionScorer.score(ChecklistSection.WATER_SOURCES, {"pest_control": Rating.GOOD})

    def test_rating_labels_are_scored(self):
        """Test that rated sections accept rating labels."""
        excellent = {key: "excellent" for key in ChecklistSection.PERSONAL_HYGIENE.definition.item_keys}
        good = {key: "good" for key in ChecklistSection.PERSONAL_HYGIENE.definition.item_keys}
        assert SectionScorer.score(ChecklistSection.PERSONAL_HYGIENE, excellent) == 20
        assert SectionScorer.score(ChecklistSection.PERSONAL_HYGIENE, good) == 15

    def test_unknown_rating_label_raises(self):
        """Test that a label outside the rating scale is rejected."""
        with pytest.raises(ValueError, match="Invalid rating 'superb'"):
            SectionScorer.score(ChecklistSection.CLEANING, {"cleaning_schedule": "superb"})

    @pytest.mark.parametrize("value", [1, "yes", Rating.GOOD])
    def test_non_boolean_document_answer_raises(self, value):
        """Test that documentation items only take true or false."""
        with pytest.raises(ValueError, match="expect true or false"):
            SectionScorer.score(ChecklistSection.DOCUMENTATION, {"business_permit": value})
