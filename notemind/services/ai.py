"""AI summarization backed by the OpenAI chat completions API."""

import logging
from dataclasses import dataclass

import openai

from notemind.config import Settings
from notemind.exceptions import AIServiceError
from notemind.services.summarizer import generate_fallback_summary, sentence_count_for_length

logger = logging.getLogger("notemind")

SUMMARY_PROMPT = "Summarize this text concisely: {text}"
NOTE_SUMMARY_PROMPT = "Summarize this note in a concise paragraph: {text}"


@dataclass
class SummaryResult:
    summary: str
    source: str  # "ai" or "fallback"


def mask_api_key(api_key: str) -> str:
    """Show only the first five and last four characters of a key."""
    if not api_key:
        return ""
    if len(api_key) <= 9:
        return "*" * len(api_key)
    return f"{api_key[:5]}...{api_key[-4:]}"


class AIService:
    """Wraps the language-model provider and its failure modes."""

    def __init__(self, settings: Settings) -> None:
        self.api_key = settings.OPENAI_API_KEY
        self.model = settings.OPENAI_MODEL
        self.max_tokens = settings.AI_MAX_TOKENS
        self._client: openai.OpenAI | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> openai.OpenAI:
        """Lazy-create the OpenAI client."""
        if not self.api_key:
            raise AIServiceError("OpenAI API key not configured", code="NO_API_KEY", status_code=500)
        if self._client is None:
            self._client = openai.OpenAI(api_key=self.api_key)
        return self._client

    def complete(self, prompt: str, max_tokens: int | None = None, temperature: float = 0.7) -> str:
        """Run a single-turn chat completion and return the reply text."""
        client = self._get_client()
        try:
            completion = client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens or self.max_tokens,
                temperature=temperature,
            )
        except openai.AuthenticationError as e:
            raise AIServiceError(
                "The provided OpenAI API key is invalid or expired", code="INVALID_API_KEY", status_code=401
            ) from e
        except openai.RateLimitError as e:
            if "quota" in str(e).lower():
                raise AIServiceError("API quota exceeded", code="QUOTA_EXCEEDED", status_code=429) from e
            raise AIServiceError("Rate limit exceeded", code="RATE_LIMITED", status_code=429) from e
        except openai.OpenAIError as e:
            raise AIServiceError(f"Failed to summarize text: {e}", code="UNKNOWN_ERROR", status_code=502) from e

        text = completion.choices[0].message.content if completion.choices else None
        if not text:
            raise AIServiceError("No response from AI service", code="EMPTY_RESPONSE", status_code=502)
        return text.strip()

    def summarize(
        self,
        text: str,
        prompt: str | None = None,
        length: str = "medium",
        allow_fallback: bool = True,
    ) -> SummaryResult:
        """Summarize ``text``, falling back to extractive summarization on provider failure."""
        try:
            summary = self.complete(prompt or SUMMARY_PROMPT.format(text=text))
            return SummaryResult(summary=summary, source="ai")
        except AIServiceError as e:
            if not allow_fallback:
                raise
            logger.warning("AI summarization unavailable (%s); using fallback summarizer", e.code)
            count = sentence_count_for_length(length, text)
            return SummaryResult(summary=generate_fallback_summary(text, count), source="fallback")

    def test_connection(self) -> str:
        """Send a trivial prompt to confirm the key and model work."""
        return self.complete("Say hello!", max_tokens=20)
