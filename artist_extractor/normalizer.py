"""Text sanitization and deterministic field extraction for artist documents"""
import re
import unicodedata
from collections import namedtuple
from typing import Callable, List, Optional

from .config import ADDRESS_MIN_LENGTH, BIO_LABELED_MIN_LENGTH, BIO_PARAGRAPH_MIN_LENGTH
from .models import ContactDetails, StructuredFields


# A regex whose first group is the candidate value, and the check the value must pass
FieldPattern = namedtuple("FieldPattern", ["pattern", "validator"])

CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]')
MARKUP_TAGS = re.compile(r'<[^<>\n]{0,80}>')
BRACKET_ARTIFACTS = re.compile(r'[\[\]{}<>]')
WHITESPACE = re.compile(r'\s+')
HORIZONTAL_WHITESPACE = re.compile(r'[^\S\n]+')
BLANK_LINES = re.compile(r'\n{3,}')

NAME_SHAPE = re.compile(r'^[A-Z][a-z]+(?:\s+[A-Z][a-z]+)+$')
PERSON_SHAPE = re.compile(r"^[A-Za-z][A-Za-z.']*(?:\s+[A-Za-z][A-Za-z.']*){0,5}$")
GHARANA_SHAPE = re.compile(r'^[A-Za-z][A-Za-z\- ]*$')
GHARANA_WORD = re.compile(r'^gharana\s+|\s+gharana$', re.IGNORECASE)
PHONE = re.compile(r'\+?\d[\d \t-]{7,}')
EMAIL = re.compile(r'[\w.+-]+@[\w.-]+\.[a-z]{2,}', re.IGNORECASE)
SENTENCE_END = re.compile(r'[.!?]')
PHONE_LIKE = re.compile(r'^[\d\s\-+()]+$')
LEADING_LABEL = re.compile(r'^[A-Za-z][A-Za-z ]{0,24}:')
WORD_START = re.compile(r"(^|[.'\-])([a-z])")
BIO_LABEL = re.compile(r'(?i:\b(?:biography|bio|about|description)\b)\s*:\s*(.*)', re.DOTALL)

TITLE_ALIASES = {
    "ustd": "Ustad",
    "ustad": "Ustad",
    "pt": "Pandit",
    "pandit": "Pandit",
    "guru": "Guru",
}
GURU_TITLES = ("Ustad", "Pandit", "Guru")

# Capitalized line openers that are document headings, not names
HEADING_WORDS = {
    "artist", "name", "profile", "biography", "bio", "about", "contact", "details",
    "guru", "gharana", "address", "phone", "email", "description", "performer",
    "information", "personal", "document",
}
GHARANA_STOPWORDS = {"the", "this", "that", "our", "his", "her", "their", "its", "a", "an", "of", "same"}


def _looks_like_name(value: str) -> bool:
    return bool(NAME_SHAPE.match(value))


def _looks_like_bare_name(value: str) -> bool:
    if not _looks_like_name(value):
        return False
    return not any(word.lower() in HEADING_WORDS for word in value.split())


def _looks_like_person(value: str) -> bool:
    return len(value) > 2 and bool(PERSON_SHAPE.match(value))


def _looks_like_gharana(value: str) -> bool:
    if not value or not GHARANA_SHAPE.match(value):
        return False
    words = value.split()
    return len(words) <= 4 and words[0].lower() not in GHARANA_STOPWORDS


def _long_enough(min_length: int) -> Callable[[str], bool]:
    return lambda value: len(value) >= min_length


ARTIST_NAME_PATTERNS = [
    FieldPattern(re.compile(
        r'(?i:\b(?:artist\s*name|name\s+of\s+(?:the\s+)?artist|performer\s*name)\b)[ \t]*[:\-]?[ \t]*([^\n,;]+)'
    ), _looks_like_name),
    FieldPattern(re.compile(
        r'^([A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+){1,2})\b', re.MULTILINE
    ), _looks_like_bare_name),
    FieldPattern(re.compile(
        r'(?i:\b(?:performer|artist|musician)\b)[ \t]*:[ \t]*([^\n,;]+)'
    ), _looks_like_name),
    FieldPattern(re.compile(
        r'(?i:\bname\b)[ \t]*:[ \t]*([A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)+)'
    ), _looks_like_name),
]

GURU_PATTERNS = [
    FieldPattern(re.compile(
        r'(?i:\b(?:guru|teacher|mentor)\b)[ \t]*:[ \t]*([^\n,;]+)'
    ), _looks_like_person),
    FieldPattern(re.compile(
        r'(?i:\b(?:trained\s+by|disciple\s+of|student\s+of|learned\s+from|under\s+the\s+guidance\s+of)\s+)'
        r'((?:(?i:ustd|ustad|pt|pandit|guru)\.?\s+)?[A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)*)'
    ), _looks_like_person),
]

GHARANA_PATTERNS = [
    FieldPattern(re.compile(
        r'(?i:\b(?:gharana|school|tradition)\b)[ \t]*:[ \t]*([^\n,;.]+)'
    ), _looks_like_gharana),
    FieldPattern(re.compile(
        r'\b([A-Z][a-z]+(?:-[A-Z][a-z]+)?)\s+(?i:gharana)\b'
    ), _looks_like_gharana),
    FieldPattern(re.compile(
        r'(?i:\btradition\s+of\s+(?:the\s+)?)([A-Z][a-z]+)'
    ), _looks_like_gharana),
]

ADDRESS_PATTERNS = [
    FieldPattern(re.compile(
        r'(?i:\b(?:address|location|residence)\b)[ \t]*:[ \t]*([^\n]+)'
    ), _long_enough(ADDRESS_MIN_LENGTH)),
    FieldPattern(re.compile(
        r'(?i:\b(?:lives?|living|based)\s+(?:at|in)\b)\s+([^\n.;]+)'
    ), _long_enough(ADDRESS_MIN_LENGTH)),
]


def collapse_whitespace(text: str) -> str:
    return WHITESPACE.sub(' ', text).strip()


def _clean(value: Optional[str]) -> Optional[str]:
    """Collapse whitespace and trim label punctuation; empty becomes None"""
    if value is None:
        return None
    cleaned = collapse_whitespace(value).strip(' .:-')
    return cleaned or None


def _clean_gharana(value: Optional[str]) -> Optional[str]:
    cleaned = _clean(value)
    if cleaned is None:
        return None
    return _clean(GHARANA_WORD.sub('', cleaned))


def _first_match(text: str,
                 patterns: List[FieldPattern],
                 clean: Callable[[Optional[str]], Optional[str]] = _clean) -> Optional[str]:
    """Evaluate patterns top to bottom; the first match passing its validator wins

    Every match of a pattern is tried before moving on to the next pattern.
    A candidate that is itself another "Label:" belongs to an empty field.
    """
    for field_pattern in patterns:
        for match in field_pattern.pattern.finditer(text):
            candidate = clean(match.group(1))
            if not candidate or LEADING_LABEL.match(candidate):
                continue
            if field_pattern.validator(candidate):
                return candidate
    return None


def _recase(word: str) -> str:
    """Capitalize all-lower or all-upper words, including initials (d.v. -> D.V.); keep mixed case"""
    if not (word.islower() or word.isupper()):
        return word
    return WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), word.lower())


def format_name(name: Optional[str]) -> Optional[str]:
    """Capitalize each word and expand title abbreviations (ustd -> Ustad, pt -> Pandit)"""
    if not name or not name.strip():
        return None
    words = []
    for word in name.split():
        title = TITLE_ALIASES.get(word.lower().rstrip('.'))
        if title:
            words.append(title)
        else:
            words.append(_recase(word))
    return ' '.join(words)


def format_guru_name(name: Optional[str]) -> Optional[str]:
    formatted = format_name(name)
    if formatted is None:
        return None
    if formatted.split()[0] not in GURU_TITLES:
        return f"Pandit {formatted}"
    return formatted


def format_gharana(gharana: Optional[str]) -> Optional[str]:
    cleaned = _clean_gharana(gharana)
    if cleaned is None:
        return None
    return ' '.join(word[:1].upper() + word[1:] for word in cleaned.split())


def format_phone(phone: Optional[str]) -> Optional[str]:
    """Normalize Indian and North American numbers; anything else is returned trimmed"""
    if not phone:
        return None
    digits = re.sub(r'\D', '', phone)
    if len(digits) == 10:
        return f"+91 {digits}"
    if len(digits) == 12 and digits.startswith("91"):
        return f"+91 {digits[2:]}"
    if len(digits) == 11 and digits.startswith("1"):
        return f"+1 {digits[1:]}"
    return phone.strip(' -') or None


class TextNormalizer:
    """Sanitizes raw extracted text and parses artist fields out of it"""

    def __init__(self):
        self.sanitize_patterns = [
            (CONTROL_CHARS, ' '),       # C0/C1 control characters
            (MARKUP_TAGS, ' '),         # Stray <tag> remnants
            (BRACKET_ARTIFACTS, ' '),   # Leftover brackets and braces
        ]

    def _strip_artifacts(self, text: str) -> str:
        text = unicodedata.normalize('NFC', text)
        for pattern, replacement in self.sanitize_patterns:
            text = pattern.sub(replacement, text)
        return text

    def sanitize(self, text: Optional[str]) -> str:
        """Return the text as a single whitespace-collapsed line"""
        if not text:
            return ""
        return collapse_whitespace(self._strip_artifacts(text))

    def sanitize_lines(self, text: Optional[str]) -> str:
        """Like sanitize, but keep line breaks and blank-line paragraph breaks"""
        if not text:
            return ""
        text = text.replace('\r\n', '\n').replace('\r', '\n')
        text = self._strip_artifacts(text)
        lines = [HORIZONTAL_WHITESPACE.sub(' ', line).strip() for line in text.split('\n')]
        return BLANK_LINES.sub('\n\n', '\n'.join(lines)).strip()

    def normalize(self, raw_text: Optional[str]) -> StructuredFields:
        """Extract structured fields; fields with no match are None"""
        if not isinstance(raw_text, str) or not raw_text.strip():
            return StructuredFields()

        text = self.sanitize_lines(raw_text)
        flat_text = collapse_whitespace(text)

        return StructuredFields(
            artist_name=self.extract_artist_name(text),
            guru_name=self.extract_guru_name(text),
            gharana=self.extract_gharana(text),
            biography=self.extract_biography(text),
            contact=ContactDetails(
                phone=self.extract_phone(text),
                email=self.extract_email(flat_text),
                address=self.extract_address(text),
            ),
        )

    def extract_artist_name(self, text: str) -> Optional[str]:
        return _first_match(text, ARTIST_NAME_PATTERNS)

    def extract_guru_name(self, text: str) -> Optional[str]:
        return format_guru_name(_first_match(text, GURU_PATTERNS))

    def extract_gharana(self, text: str) -> Optional[str]:
        return _first_match(text, GHARANA_PATTERNS, clean=_clean_gharana)

    def extract_address(self, text: str) -> Optional[str]:
        return _first_match(text, ADDRESS_PATTERNS)

    def extract_phone(self, text: str) -> Optional[str]:
        for match in PHONE.finditer(text):
            if len(re.sub(r'\D', '', match.group())) >= 10:
                return format_phone(match.group())
        return None

    def extract_email(self, text: str) -> Optional[str]:
        match = EMAIL.search(text)
        return match.group().lower() if match else None

    def extract_biography(self, text: str) -> Optional[str]:
        paragraphs = [p for p in text.split('\n\n') if p.strip()]

        for index, paragraph in enumerate(paragraphs):
            match = BIO_LABEL.search(paragraph)
            if not match:
                continue
            body = collapse_whitespace(match.group(1))
            # Label on its own line: the block is the next paragraph
            if not body and index + 1 < len(paragraphs):
                body = collapse_whitespace(paragraphs[index + 1])
            if len(body) >= BIO_LABELED_MIN_LENGTH:
                return body

        for paragraph in paragraphs:
            candidate = collapse_whitespace(paragraph)
            if (len(candidate) > BIO_PARAGRAPH_MIN_LENGTH
                    and SENTENCE_END.search(candidate)
                    and not PHONE_LIKE.match(candidate)):
                return candidate
        return None
