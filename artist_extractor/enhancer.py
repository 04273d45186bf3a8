"""Optional AI enhancement of extracted fields, with deterministic fallbacks"""
import json
import re
from typing import Any, Dict, Optional

from loguru import logger

from .config import LLM_CONTEXT_CHARS
from .llm_client import LLMClient
from .models import StructuredFields
from .normalizer import collapse_whitespace, format_gharana, format_guru_name, format_name, format_phone


SENTENCE_START = re.compile(r'([.!?])\s+([a-z])')

FIELD_PROMPTS = {
    "artistName": 'Clean and format this artist name: "{value}"\n'
                  'Rules: Proper capitalization, add titles like "Ustad" or "Pandit" if appropriate.\n'
                  'Return only the cleaned name.',
    "guruName": 'Clean and format this guru name: "{value}"\n'
                'Rules: Proper capitalization, add "Pandit" or "Ustad" title if missing.\n'
                'Return only the cleaned name.',
    "gharana": 'Clean this gharana name: "{value}"\n'
               'Rules: Proper capitalization, remove "gharana" suffix if present.\n'
               'Return only the gharana name.',
    "biography": 'Improve this biography: "{value}"\n'
                 'Rules: Fix grammar, improve structure, keep the same information.\n'
                 'Return only the improved text.',
}


def format_biography(biography: Optional[str]) -> Optional[str]:
    if not biography or not biography.strip():
        return None
    text = collapse_whitespace(biography)
    text = SENTENCE_START.sub(lambda m: f"{m.group(1)} {m.group(2).upper()}", text)
    return text[:1].upper() + text[1:]


def _clean_string(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return collapse_whitespace(value) or None


class AIEnhancer:
    """Cleans extracted fields with an LLM, or deterministically when the LLM is unavailable"""

    def __init__(self, llm_client: Optional[LLMClient] = None, use_llm: bool = True):
        if llm_client is None and use_llm:
            try:
                llm_client = LLMClient()
            except ValueError as e:
                logger.info(f"AI enhancement disabled, using deterministic formatting: {e}")
        self.llm_client = llm_client if use_llm else None

    def enhance_structured(self, fields: StructuredFields, raw_text: str = "") -> Dict[str, Any]:
        """Return cleaned fields as a dict; never raises"""
        if self.llm_client is None:
            return self.deterministic_fallback(fields)

        try:
            response = self.llm_client.complete_json(
                self._structured_prompt(fields, raw_text), temperature=0.1
            )
            enhanced = self._parse_structured(response)
        except Exception as e:
            logger.warning(f"AI structured enhancement failed, using deterministic fallback: {e}")
            return self.deterministic_fallback(fields)

        enhanced["_metadata"] = {
            "provider": "openai", "model": self.llm_client.model, "mode": "structured", "llm_used": True,
        }
        logger.info(f"Structured enhancement completed using {self.llm_client.model}")
        return enhanced

    def enhance_summary(self, fields: StructuredFields, raw_text: str = "") -> Dict[str, Any]:
        """Return biography, description and summary texts; never raises"""
        if self.llm_client is None:
            return self.basic_summary_fallback(fields)

        try:
            response = self.llm_client.complete_json(
                self._summary_prompt(fields, raw_text), temperature=0.3
            )
            summary = {key: _clean_string(response.get(key)) for key in ("biography", "description", "summary")}
            if not any(summary.values()):
                raise ValueError("Invalid summary response - missing content")
        except Exception as e:
            logger.warning(f"AI summary enhancement failed, using basic fallback: {e}")
            return self.basic_summary_fallback(fields)

        summary["_metadata"] = {
            "provider": "openai", "model": self.llm_client.model, "mode": "summary", "llm_used": True,
        }
        return summary

    def enhance_field(self, field_name: str, value: Optional[str]) -> Optional[str]:
        """Enhance a single field value, falling back to deterministic formatting"""
        if not isinstance(value, str) or not value.strip():
            return None
        if self.llm_client is not None:
            prompt = FIELD_PROMPTS.get(field_name, 'Clean and format: "{value}"\nReturn only the cleaned text.')
            try:
                return collapse_whitespace(self.llm_client.complete_text(prompt.format(value=value))) or None
            except Exception as e:
                logger.warning(f"Field enhancement failed for '{field_name}', using deterministic: {e}")
        return self.deterministic_field(field_name, value)

    def deterministic_field(self, field_name: str, value: str) -> Optional[str]:
        if field_name == "artistName":
            return format_name(value)
        if field_name == "guruName":
            return format_guru_name(value)
        if field_name == "gharana":
            return format_gharana(value)
        if field_name == "biography":
            return format_biography(value)
        if field_name == "phone":
            return format_phone(value)
        return collapse_whitespace(value) or None

    def deterministic_fallback(self, fields: StructuredFields) -> Dict[str, Any]:
        contact = fields.contact
        return {
            "artistName": format_name(fields.artist_name),
            "guruName": format_guru_name(fields.guru_name),
            "gharana": format_gharana(fields.gharana),
            "biography": format_biography(fields.biography),
            "contact": {
                "phone": format_phone(contact.phone),
                "email": contact.email.strip().lower() if contact.email else None,
                "address": _clean_string(contact.address),
            },
            "_metadata": {"provider": "deterministic", "mode": "structured", "llm_used": False},
        }

    def basic_summary_fallback(self, fields: StructuredFields) -> Dict[str, Any]:
        summary_text = f"{fields.artist_name or 'This artist'} is a classical music artist"
        if fields.gharana:
            summary_text += f" from the {fields.gharana} gharana"
        if fields.guru_name:
            summary_text += f" trained under {fields.guru_name}"
        summary_text += "."

        return {
            "biography": fields.biography or summary_text,
            "description": summary_text,
            "summary": summary_text,
            "_metadata": {"provider": "basic", "mode": "summary", "llm_used": False},
        }

    def _parse_structured(self, response: Dict[str, Any]) -> Dict[str, Any]:
        if not any(response.get(key) for key in ("artistName", "guruName", "gharana")):
            raise ValueError("Invalid structured response - missing key fields")

        contact = response.get("contact") or response.get("contactDetails") or {}
        if not isinstance(contact, dict):
            contact = {}
        return {
            "artistName": _clean_string(response.get("artistName")),
            "guruName": _clean_string(response.get("guruName")),
            "gharana": _clean_string(response.get("gharana")),
            "biography": _clean_string(response.get("biography")),
            "contact": {
                "phone": _clean_string(contact.get("phone")),
                "email": (_clean_string(contact.get("email")) or "").lower() or None,
                "address": _clean_string(contact.get("address")),
            },
        }

    def _structured_prompt(self, fields: StructuredFields, raw_text: str) -> str:
        return f"""Extract and enhance the following artist information into clean, structured JSON.

INPUT DATA:
{json.dumps(fields.to_dict(), indent=2, ensure_ascii=False)}

RAW TEXT:
{(raw_text or '')[:LLM_CONTEXT_CHARS]}

INSTRUCTIONS:
1. Format names properly (proper capitalization, titles like "Ustad", "Pandit")
2. Standardize phone numbers and email addresses
3. Write a concise, professional biography
4. Use null for anything not present in the input
5. Return ONLY a JSON object in this exact format:

{{
  "artistName": "properly formatted name",
  "guruName": "properly formatted guru name with title",
  "gharana": "gharana name without 'gharana' suffix",
  "biography": "2-3 sentence professional biography",
  "contact": {{
    "phone": "standardized phone format",
    "email": "lowercase email",
    "address": "properly formatted address"
  }}
}}
"""

    def _summary_prompt(self, fields: StructuredFields, raw_text: str) -> str:
        return f"""Write a profile for this classical music artist.

ARTIST DETAILS:
- Name: {fields.artist_name or 'Not specified'}
- Guru: {fields.guru_name or 'Not specified'}
- Gharana: {fields.gharana or 'Not specified'}

RAW INFORMATION:
{(raw_text or '')[:LLM_CONTEXT_CHARS]}

Return a JSON object:
{{
  "biography": "detailed 2-3 paragraph biography",
  "description": "1 paragraph description",
  "summary": "2-3 sentence summary"
}}

Focus on their classical music training, artistic contributions, and cultural significance.
"""
