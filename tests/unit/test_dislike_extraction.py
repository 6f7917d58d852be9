"""Tests for dislike extraction."""

import pytest

from stridematch.agents.dislike_extraction import (
    extract_dislikes,
    find_dislike_phrases,
    is_feature_complaint,
    split_candidates,
)
from stridematch.matching.catalog_matcher import identify_model
from stridematch.matching.normalizer import Vocabulary


class TestFindDislikePhrases:
    """Tests for the two pattern families."""

    def test_negative_verb_stops_at_comma(self):
        """The capture ends at punctuation."""
        assert find_dislike_phrases("I didn't like t novablast, it felt odd.") == ["t novablast"]

    def test_negative_verb_stops_at_boundary_word(self):
        """The capture ends before 'felt', 'was' or 'seemed'."""
        assert find_dislike_phrases("I hated the mach 6 it felt harsh") == ["the mach 6 it"]
        assert find_dislike_phrases("I dislike the rebel v4 which seemed flat") == [
            "the rebel v4 which"
        ]

    def test_curly_apostrophe(self):
        """Typographic apostrophes are accepted."""
        assert find_dislike_phrases("I didn’t like the Mach 6") == ["the mach 6"]

    def test_not_a_fan_of(self):
        """'not a fan of' is a negative marker."""
        assert find_dislike_phrases("Not a fan of the Clifton 9!") == ["the clifton 9"]

    def test_complaint_construction(self):
        """'X wasn't for me' captures X without the article."""
        assert find_dislike_phrases("The Clifton 9 wasn't for me") == ["clifton 9"]
        assert find_dislike_phrases("the rebel v4 didn't work for me") == ["rebel v4"]
        assert find_dislike_phrases("the ride 17 was not my thing") == ["ride 17"]

    @pytest.mark.parametrize(
        "text",
        ["The Pegasus 41 was my thing", "The Clifton 9 did work for me"],
    )
    def test_positive_statements_not_captured(self, text):
        """Only negated complaint endings count, apart from 'was for me'."""
        assert find_dislike_phrases(text) == []

    def test_complaint_window_is_bounded(self):
        """A complaint ending only looks back over a few words."""
        phrases = find_dislike_phrases(
            "i ran a lot of miles this year in the clifton 9 and it wasn't for me"
        )
        assert phrases == ["in the clifton 9 and it"]

    def test_no_markers(self):
        """Plain text yields nothing."""
        assert find_dislike_phrases("I love my Pegasus 41") == []


class TestSplitCandidates:
    """Tests for split_candidates()."""

    def test_and(self):
        """Compound phrases split on 'and'."""
        assert split_candidates("asics novablast and gel-cumulus 26") == [
            "asics novablast",
            "gel-cumulus 26",
        ]

    def test_mixed_separators(self):
        """'or', commas and slashes all separate candidates."""
        assert split_candidates("mach 6 / clifton 9, rincon 3 or arahi 7") == [
            "mach 6",
            "clifton 9",
            "rincon 3",
            "arahi 7",
        ]

    def test_words_containing_separators_not_split(self):
        """'or' and 'and' only split as whole words."""
        assert split_candidates("forerunner landing") == ["forerunner landing"]


class TestIsFeatureComplaint:
    """Tests for is_feature_complaint()."""

    @pytest.mark.parametrize(
        "phrase",
        ["the laces", "fit", "the price", "colour", "the color", "the upper", "the looks"],
    )
    def test_feature_phrases(self, phrase):
        """Attribute complaints are detected."""
        assert is_feature_complaint(phrase)

    @pytest.mark.parametrize("phrase", ["the pegasus 41", "novablast", "clifton 9"])
    def test_shoe_phrases(self, phrase):
        """Model names are not feature complaints."""
        assert not is_feature_complaint(phrase)

    def test_custom_keywords(self):
        """Feature keywords come from the vocabulary."""
        vocabulary = Vocabulary(feature_keywords=("sole",))
        assert is_feature_complaint("the sole", vocabulary)
        assert not is_feature_complaint("the laces", vocabulary)


class TestExtractDislikes:
    """Tests for extract_dislikes()."""

    def test_typo_and_stray_letter(self, catalog):
        """'t novablast' resolves to the Novablast model."""
        result = extract_dislikes("i didn't like t novablast, it felt odd.", catalog)
        assert result.dislikes == ["novablast 4"]
        assert result.clarifications == []

    def test_exact_model(self, catalog):
        """An exact model name is a confirmed dislike."""
        result = extract_dislikes("I don't like the Pegasus 41", catalog)
        assert result.dislikes == ["pegasus 41"]
        assert result.clarifications == []

    def test_feature_complaints_ignored(self, catalog):
        """Complaints about laces and fit produce nothing."""
        result = extract_dislikes("I hated the laces and the fit", catalog)
        assert result.dislikes == []
        assert result.clarifications == []

    @pytest.mark.parametrize(
        "text",
        [
            "I didn't like the price",
            "I hated the colour",
            "I don't like the fit or the laces",
            "the upper wasn't for me",
        ],
    )
    def test_feature_complaints_never_recorded(self, catalog, text):
        """No feature complaint becomes a dislike or a clarification."""
        result = extract_dislikes(text, catalog)
        assert result.dislikes == []
        assert result.clarifications == []

    def test_compound_phrase_gives_two_models(self, catalog):
        """Two shoes in one statement become two dislikes."""
        result = extract_dislikes(
            "I didn't like the Asics Novablast and Gel-Cumulus 26", catalog
        )
        assert result.dislikes == ["novablast 4", "gel-cumulus 26"]

    def test_unknown_model_needs_clarification(self, catalog):
        """A phrase unlike any model is surfaced for clarification."""
        result = extract_dislikes("I didn't like xblast", catalog)
        assert result.dislikes == []
        assert len(result.clarifications) == 1
        assert result.clarifications[0].input == "xblast"
        assert result.clarifications[0].confidence < 0.8

    def test_plural_shoe_phrase(self, catalog):
        """'the Pegasus shoes' still resolves to the Pegasus."""
        result = extract_dislikes("I'm not a fan of the Pegasus shoes", catalog)
        assert result.dislikes == ["pegasus 41"]

    def test_repeated_dislike_deduplicated(self, catalog):
        """The same model mentioned twice is recorded once."""
        result = extract_dislikes(
            "I didn't like the Pegasus 41. Honestly I hated the pegasus 41!", catalog
        )
        assert result.dislikes == ["pegasus 41"]

    def test_families_merged_without_duplicates(self, catalog):
        """A model found by both pattern families is recorded once."""
        result = extract_dislikes(
            "I didn't like the mach 6. The mach 6 wasn't for me", catalog
        )
        assert result.dislikes == ["mach 6"]

    def test_insertion_order_preserved(self, catalog):
        """Dislikes keep the order they were first found in."""
        result = extract_dislikes(
            "I didn't like the clifton 9, I hated the rincon 3", catalog
        )
        assert result.dislikes == ["clifton 9", "rincon 3"]

    def test_short_noise_dropped(self, catalog):
        """Unmatched candidates shorter than three characters are ignored."""
        result = extract_dislikes("I hate it", catalog)
        assert result.dislikes == []
        assert result.clarifications == []

    def test_repeated_clarification_not_duplicated(self, catalog):
        """The same unresolved input is asked about once."""
        result = extract_dislikes("I didn't like xblast. I hated xblast", catalog)
        assert [c.input for c in result.clarifications] == ["xblast"]

    def test_threshold_override(self, catalog):
        """Raising the threshold turns a stem match into a clarification."""
        result = extract_dislikes("I didn't like the novablast", catalog, threshold=0.95)
        assert result.dislikes == []
        assert len(result.clarifications) == 1
        assert result.clarifications[0].suggestion == "novablast 4"
        assert result.clarifications[0].confidence == pytest.approx(0.9)

    def test_empty_text(self, catalog):
        """Empty text yields an empty result."""
        result = extract_dislikes("", catalog)
        assert result.dislikes == []
        assert result.clarifications == []

    def test_empty_catalog_asks_instead_of_guessing(self):
        """Without a catalog every candidate needs clarification."""
        result = extract_dislikes("I didn't like the pegasus 41", [])
        assert result.dislikes == []
        assert result.clarifications[0].suggestion is None
        assert result.clarifications[0].confidence == 0.0

    @pytest.mark.parametrize(
        "text",
        [
            "I didn't like t novablast, it felt odd.",
            "I didn't like xblast",
            "I didn't like the cliftn 9 and the zoomfly",
            "the endorphin wasn't for me, I hated the rockt",
        ],
    )
    def test_confidence_gating(self, catalog, text):
        """Accepted candidates score >= 0.8 and clarifications score below it."""
        result = extract_dislikes(text, catalog)
        for clarification in result.clarifications:
            assert clarification.confidence < 0.8
        for model in result.dislikes:
            assert identify_model(model, catalog).confidence >= 0.8

    @pytest.mark.parametrize(
        "text",
        ["", "!!!", "didn't like", "hate hate hate", "x" * 500, "was for me was for me"],
    )
    def test_adversarial_input_never_raises(self, catalog, text):
        """Odd input gives a well-formed result."""
        result = extract_dislikes(text, catalog)
        assert isinstance(result.dislikes, list)
        assert isinstance(result.clarifications, list)

    @pytest.mark.parametrize(
        "text",
        ["The Pegasus 41 was my thing", "The Clifton 9 did work for me"],
    )
    def test_positive_statements_not_disliked(self, catalog, text):
        """Praise for a shoe never excludes it."""
        result = extract_dislikes(text, catalog)
        assert result.dislikes == []
        assert result.clarifications == []
