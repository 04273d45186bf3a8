"""Tests for confidence scoring"""
from artist_extractor.scorer import ConfidenceScorer


FILLER = "the quick brown fox jumps over the lazy dog " * 3


class TestConfidenceScorer:
    """Tests for the advisory confidence tier."""

    def setup_method(self):
        self.scorer = ConfidenceScorer()

    def test_empty_and_short_text_is_low(self):
        assert self.scorer.score("") == "low"
        assert self.scorer.score("short") == "low"
        assert self.scorer.quality_score("") == 0

    def test_rich_profile_is_high(self):
        text = (
            "Artist Ravi Shankar studied under his guru for many years. "
            + "He performed and taught music across many cities. " * 15
            + "Contact: ravi@example.com"
        )
        assert self.scorer.score(text) == "high"
        assert self.scorer.quality_score(text) == 100

    def test_medium_tier(self):
        # 29 words (+1), proper-noun bigram (+1), clean characters (+1)
        text = "Ravi Shankar " + FILLER
        assert self.scorer.score(text) == "medium"
        assert self.scorer.quality_score(text) == 38

    def test_plain_lowercase_text_is_low(self):
        assert self.scorer.score(FILLER) == "low"

    def test_noise_is_low(self):
        assert self.scorer.score("#$%^&*" * 5) == "low"

    def test_invalid_input_degrades_instead_of_raising(self):
        assert self.scorer.score(12345) == "low"
        assert self.scorer.quality_score(12345) == 0
