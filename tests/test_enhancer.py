"""Tests for AI enhancement and its deterministic fallbacks"""
import pytest

from artist_extractor import enhancer as enhancer_module
from artist_extractor import llm_client
from artist_extractor.config import LLM_CONTEXT_CHARS
from artist_extractor.enhancer import AIEnhancer, format_biography
from artist_extractor.models import ContactDetails, StructuredFields

from .fakes import FakeLLM


def sample_fields():
    return StructuredFields(
        artist_name="ravi shankar",
        guru_name="allauddin khan",
        gharana="maihar gharana",
        biography="he was a sitar player.  he toured widely.",
        contact=ContactDetails(phone="9998887777", email=" Ravi@X.com ", address="12  Music   Lane"),
    )


class TestDeterministicEnhancement:
    """Tests for enhancement without an LLM."""

    @pytest.fixture(autouse=True)
    def no_api_key(self, monkeypatch):
        monkeypatch.setattr(llm_client, "OPENAI_API_KEY", None)

    def test_llm_disabled_without_key(self):
        assert AIEnhancer().llm_client is None

    def test_structured_fallback(self):
        enhanced = AIEnhancer().enhance_structured(sample_fields(), "raw")

        assert enhanced["artistName"] == "Ravi Shankar"
        assert enhanced["guruName"] == "Pandit Allauddin Khan"
        assert enhanced["gharana"] == "Maihar"
        assert enhanced["biography"] == "He was a sitar player. He toured widely."
        assert enhanced["contact"] == {
            "phone": "+91 9998887777",
            "email": "ravi@x.com",
            "address": "12 Music Lane",
        }
        assert enhanced["_metadata"]["provider"] == "deterministic"

    def test_empty_fields_stay_empty(self):
        enhanced = AIEnhancer().enhance_structured(StructuredFields(), "")
        assert enhanced["artistName"] is None
        assert enhanced["contact"]["email"] is None

    def test_summary_fallback(self):
        fields = StructuredFields(artist_name="Ravi Shankar", guru_name="Pandit Allauddin Khan", gharana="Maihar")

        summary = AIEnhancer().enhance_summary(fields)

        assert summary["summary"] == (
            "Ravi Shankar is a classical music artist from the Maihar gharana "
            "trained under Pandit Allauddin Khan."
        )
        assert summary["biography"] == summary["summary"]

    def test_field_fallback(self):
        enhancer = AIEnhancer()
        assert enhancer.enhance_field("artistName", "ustd zakir hussain") == "Ustad Zakir Hussain"
        assert enhancer.enhance_field("phone", "999-888-7777") == "+91 9998887777"
        assert enhancer.enhance_field("gharana", None) is None
        assert enhancer.enhance_field("gharana", "   ") is None

    def test_format_biography(self):
        assert format_biography("first.  second! third") == "First. Second! Third"
        assert format_biography("   ") is None


class TestDisabledLLM:
    """Tests for an enhancer that must not build an LLM client."""

    def test_use_llm_false_skips_client_even_with_key(self, monkeypatch):
        def fail_to_build(*args, **kwargs):
            raise AssertionError("LLM client should not be constructed")

        monkeypatch.setattr(llm_client, "OPENAI_API_KEY", "sk-test")
        monkeypatch.setattr(enhancer_module, "LLMClient", fail_to_build)

        enhancer = AIEnhancer(use_llm=False)

        assert enhancer.llm_client is None
        assert enhancer.enhance_structured(sample_fields(), "raw")["_metadata"]["llm_used"] is False

    def test_use_llm_false_ignores_given_client(self):
        llm = FakeLLM(reply={"artistName": "Someone Else"})

        enhanced = AIEnhancer(llm_client=llm, use_llm=False).enhance_structured(sample_fields(), "raw")

        assert enhanced["artistName"] == "Ravi Shankar"
        assert llm.prompts == []

    def test_blank_llm_reply_becomes_none(self):
        llm = FakeLLM(reply="   ")
        assert AIEnhancer(llm_client=llm).enhance_field("biography", "sitar player") is None


class TestLLMEnhancement:
    """Tests for enhancement through a (fake) LLM."""

    def test_structured_reply_is_cleaned(self):
        llm = FakeLLM(reply={
            "artistName": " Pandit Ravi Shankar ",
            "guruName": "Ustad Allauddin Khan",
            "gharana": "Maihar",
            "biography": None,
            "contact": {"email": "RAVI@X.COM", "phone": "+91 9998887777"},
        })
        enhancer = AIEnhancer(llm_client=llm)

        enhanced = enhancer.enhance_structured(sample_fields(), "raw")

        assert enhanced["artistName"] == "Pandit Ravi Shankar"
        assert enhanced["biography"] is None
        assert enhanced["contact"]["email"] == "ravi@x.com"
        assert enhanced["contact"]["address"] is None
        assert enhanced["_metadata"] == {
            "provider": "openai", "model": "fake-model", "mode": "structured", "llm_used": True,
        }

    def test_reply_without_key_fields_falls_back(self):
        enhancer = AIEnhancer(llm_client=FakeLLM(reply={"biography": "Something"}))

        enhanced = enhancer.enhance_structured(sample_fields(), "raw")

        assert enhanced["_metadata"]["provider"] == "deterministic"
        assert enhanced["_metadata"]["llm_used"] is False

    def test_provider_error_never_raises(self):
        enhancer = AIEnhancer(llm_client=FakeLLM(error=RuntimeError("rate limited")))

        assert enhancer.enhance_structured(sample_fields(), "raw")["artistName"] == "Ravi Shankar"
        assert "classical music artist" in enhancer.enhance_summary(sample_fields())["summary"]
        assert enhancer.enhance_field("guruName", "ravi shankar") == "Pandit Ravi Shankar"

    def test_prompt_caps_raw_text(self):
        llm = FakeLLM(reply={"artistName": "Ravi Shankar"})
        raw_text = "Q" * (LLM_CONTEXT_CHARS * 2)

        AIEnhancer(llm_client=llm).enhance_structured(sample_fields(), raw_text)

        assert "Q" * LLM_CONTEXT_CHARS in llm.prompts[0]
        assert "Q" * (LLM_CONTEXT_CHARS + 1) not in llm.prompts[0]

    def test_summary_reply(self):
        llm = FakeLLM(reply={"biography": "Long bio.", "description": "Desc.", "summary": "Short."})

        summary = AIEnhancer(llm_client=llm).enhance_summary(sample_fields(), "raw")

        assert summary["summary"] == "Short."
        assert summary["_metadata"]["mode"] == "summary"

    def test_field_reply(self):
        llm = FakeLLM(reply="Ustad Zakir Hussain")
        assert AIEnhancer(llm_client=llm).enhance_field("artistName", "zakir") == "Ustad Zakir Hussain"
