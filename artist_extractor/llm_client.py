"""LLM client for optional AI enhancement of extracted fields"""
import json
import re
from typing import Dict, Optional

from openai import OpenAI

from .config import OPENAI_API_KEY, LLM_MODEL


CODE_FENCE = re.compile(r'^```(?:json)?\s*|\s*```$')


class LLMClient:
    """Client for OpenAI API (text completion returning JSON)"""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        api_key = api_key or OPENAI_API_KEY
        if not api_key:
            raise ValueError("OPENAI_API_KEY not set in environment variables")
        self.client = OpenAI(api_key=api_key)
        self.model = model or LLM_MODEL

    def complete_json(self,
                      prompt: str,
                      temperature: float = 0.1,
                      max_tokens: int = 1024) -> Dict:
        """
        Send a prompt and parse the reply as a JSON object

        Raises:
            ValueError: the reply is empty or not a JSON object
        """
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": "You are a precise data-cleaning assistant. Return only valid JSON."},
                {"role": "user", "content": prompt}
            ],
            response_format={"type": "json_object"},
            temperature=temperature,
            max_tokens=max_tokens,
        )

        result_text = (response.choices[0].message.content or "").strip()
        if not result_text:
            raise ValueError("Empty response from LLM")

        result = json.loads(CODE_FENCE.sub('', result_text))
        if not isinstance(result, dict):
            raise ValueError("LLM response is not a JSON object")
        return result

    def complete_text(self, prompt: str, temperature: float = 0.1, max_tokens: int = 200) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        result_text = (response.choices[0].message.content or "").strip()
        if not result_text:
            raise ValueError("Empty response from LLM")
        return result_text
