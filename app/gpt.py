from typing import Optional

from openai import OpenAI

from .config import Settings, clamp_timeout

# ----------------------
# Completion client
# ----------------------

class CompletionClient:
    """xAI chat completions through the OpenAI SDK (the API is OpenAI-compatible)."""

    def __init__(self, settings: Settings, timeout_ms: Optional[int] = None):
        if not settings.xai_api_key:
            raise RuntimeError("Missing XAI_API_KEY")
        self.model = settings.xai_model
        self.timeout_ms = clamp_timeout(timeout_ms if timeout_ms is not None else settings.default_timeout_ms)
        # Page-advance in the import loop is the only retry policy
        self.client = OpenAI(
            api_key=settings.xai_api_key,
            base_url=settings.xai_base_url,
            timeout=self.timeout_ms / 1000,
            max_retries=0,
        )

    def complete(self, prompt: str, temperature: float = 0.2) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "CompletionClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
