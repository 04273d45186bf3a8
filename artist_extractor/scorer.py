"""Heuristic confidence scoring of extracted text"""
import re

from loguru import logger


DOMAIN_KEYWORDS = re.compile(r'\b(?:name|guru|gharana|phone|email|artist|performer)\b', re.IGNORECASE)
CONTACT_HINT = re.compile(r'@|\+?\d[\d\s-]{8,}\d')
PROPER_NOUN_BIGRAM = re.compile(r'\b[A-Z][a-z]+\s+[A-Z][a-z]+\b')
ORDINARY_PUNCTUATION = set(".,;:!?'\"()-@+/&")


class ConfidenceScorer:
    """Scores text into an advisory low/medium/high tier

    The tier is surfaced to operators only. It never decides whether an
    extraction succeeded.
    """

    HIGH_THRESHOLD = 6
    MEDIUM_THRESHOLD = 3
    MAX_POINTS = 8
    MIN_TEXT_LENGTH = 10
    SPECIAL_CHAR_DENSITY = 0.05

    def score(self, text: str) -> str:
        """Return "low", "medium" or "high"; degrades to "low" on any internal error"""
        try:
            points = self._points(text)
        except Exception as e:
            logger.warning(f"Confidence scoring failed, defaulting to low: {e}")
            return "low"

        if points >= self.HIGH_THRESHOLD:
            return "high"
        if points >= self.MEDIUM_THRESHOLD:
            return "medium"
        return "low"

    def quality_score(self, text: str) -> int:
        """Same points as score(), as a 0-100 percentage"""
        try:
            points = self._points(text)
        except Exception as e:
            logger.warning(f"Quality scoring failed, defaulting to 0: {e}")
            return 0
        return round(100 * points / self.MAX_POINTS)

    def _points(self, text: str) -> int:
        if not text or len(text.strip()) < self.MIN_TEXT_LENGTH:
            return 0

        points = 0

        word_count = len(text.split())
        if word_count > 100:
            points += 3
        elif word_count > 50:
            points += 2
        elif word_count > 20:
            points += 1

        if DOMAIN_KEYWORDS.search(text):
            points += 2
        if CONTACT_HINT.search(text):
            points += 1
        if PROPER_NOUN_BIGRAM.search(text):
            points += 1
        if self._special_char_density(text) < self.SPECIAL_CHAR_DENSITY:
            points += 1

        return points

    def _special_char_density(self, text: str) -> float:
        """Share of characters that are neither alphanumeric, whitespace nor ordinary punctuation"""
        special = sum(
            1 for c in text
            if not (c.isalnum() or c.isspace() or c in ORDINARY_PUNCTUATION)
        )
        return special / len(text)
