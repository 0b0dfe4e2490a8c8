"""
Unit tests for the VerbClassifier component.
"""

import pytest

from clockvoice.intelligence.verb_classifier import VerbClassifier, canonical_verb, find_verb_position
from tests.fixtures.stubs import FailingTagger


class TestVerbClassifier:
    """Test suite for VerbClassifier"""

    @pytest.fixture
    def classifier(self):
        return VerbClassifier()

    @pytest.mark.unit
    @pytest.mark.parametrize("text,expected", [
        ("Add sara on december 15", "add"),
        ("CHANGE row 3 for ling", "change"),
        ("delete row 3 carmen", "delete"),
        ("update row 3 for ling", "change"),
        ("modify row 3 for ling", "change"),
        ("remove row 3 for ling", "delete"),
        ("create a punch for ling", "add"),
    ])
    def test_vocabulary_and_synonyms(self, classifier, text, expected):
        assert classifier.classify(text) == expected

    @pytest.mark.unit
    def test_vocabulary_order_breaks_ties(self, classifier):
        """The earlier vocabulary word wins regardless of position in the text"""
        assert classifier.classify("delete the old one and add a new one") == "add"

    @pytest.mark.unit
    def test_substring_containment(self, classifier):
        assert classifier.classify("please readd bob") == "add"

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["", "sara december 15 at 9 am in", "fix row 3"])
    def test_no_verb(self, classifier, text):
        assert classifier.classify(text) is None

    @pytest.mark.unit
    def test_tagger_consulted(self, stub_tagger):
        classifier = VerbClassifier(stub_tagger)
        assert classifier.classify("change row 3 for ling") == "change"
        assert stub_tagger.calls == 1

    @pytest.mark.unit
    def test_tagger_failure_ignored(self):
        assert VerbClassifier(FailingTagger()).classify("delete row 3") == "delete"


class TestVerbHelpers:
    """Test suite for verb helper functions"""

    @pytest.mark.unit
    def test_canonical_verb(self):
        assert canonical_verb("update") == "change"
        assert canonical_verb("add") == "add"

    @pytest.mark.unit
    def test_find_verb_position(self):
        assert find_verb_position("bob said add ling") == 9
        assert find_verb_position("bob said Remove ling") == 9

    @pytest.mark.unit
    def test_find_verb_position_whole_words_only(self):
        assert find_verb_position("please readd bob") is None
        assert find_verb_position("") is None
