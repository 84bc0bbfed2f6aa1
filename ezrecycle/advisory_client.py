"""Advisory Client — the single gateway to the Gemini recycling oracle.

One instance is built at application startup and injected into the
guidance pipeline. The google-genai session is created lazily on the first
call and reused for the life of the process.

Failure contract:
  - no GEMINI_API_KEY      → OracleUnavailable, raised before any network I/O
  - SDK / network failure  → OracleCallFailed (chained from the cause)
There are no retries: one oracle invocation per submission.
"""

import asyncio
import logging
import time
from typing import Optional

from google import genai
from google.genai import types

from ezrecycle.api_keys import get_gemini_key
from ezrecycle.config_loader import AdvisoryConfig, get_config
from ezrecycle.errors import OracleCallFailed, OracleUnavailable

logger = logging.getLogger(__name__)


class AdvisoryClient:
    """Owns the oracle session and turns a prompt into raw reply text."""

    def __init__(
        self,
        model: str = "gemini-2.5-flash-lite",
        temperature: float = 0.4,
        max_output_tokens: Optional[int] = None,
        timeout_s: Optional[float] = None,
        json_mode: bool = False,
        api_key: Optional[str] = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.timeout_s = timeout_s
        self.json_mode = json_mode
        self._api_key = api_key if api_key is not None else get_gemini_key()
        self._client: Optional[genai.Client] = None

        if not self._api_key:
            logger.warning("GEMINI_API_KEY not set — recycling guidance will run in degraded mode")

    @classmethod
    def from_config(cls, advisory: Optional[AdvisoryConfig] = None) -> "AdvisoryClient":
        advisory = advisory or get_config().advisory
        return cls(
            model=advisory.model,
            temperature=advisory.temperature,
            max_output_tokens=advisory.max_output_tokens,
            timeout_s=advisory.timeout_s,
            json_mode=advisory.json_mode,
        )

    def is_configured(self) -> bool:
        return bool(self._api_key)

    def _get_client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
            logger.info(f"Gemini session initialized (model={self.model})")
        return self._client

    def _generation_config(self) -> types.GenerateContentConfig:
        config_kwargs: dict = {"temperature": self.temperature}
        if self.json_mode:
            config_kwargs["response_mime_type"] = "application/json"
        if self.max_output_tokens:
            config_kwargs["max_output_tokens"] = self.max_output_tokens
        return types.GenerateContentConfig(**config_kwargs)

    async def request_guidance(self, prompt: str) -> str:
        """Send one compiled prompt and return the oracle's raw text.

        Raises:
            OracleUnavailable: no API key is configured.
            OracleCallFailed: the SDK raised, timed out, or returned no text.
        """
        if not self._api_key:
            raise OracleUnavailable("GEMINI_API_KEY not set")

        client = self._get_client()
        t0 = time.time()

        try:
            call = client.aio.models.generate_content(
                model=self.model,
                contents=[
                    types.Content(
                        role="user",
                        parts=[types.Part.from_text(text=prompt)],
                    )
                ],
                config=self._generation_config(),
            )
            if self.timeout_s:
                response = await asyncio.wait_for(call, timeout=self.timeout_s)
            else:
                response = await call
        except Exception as e:
            logger.error(f"Gemini API error ({self.model}): {e}")
            raise OracleCallFailed(f"Gemini API error ({self.model}): {e}") from e

        text = response.text or ""
        usage = getattr(response, "usage_metadata", None)
        input_tokens = getattr(usage, "prompt_token_count", 0) if usage else 0
        output_tokens = getattr(usage, "candidates_token_count", 0) if usage else 0
        logger.info(
            f"Gemini reply: {len(text)} chars in {round(time.time() - t0, 2)}s "
            f"(tokens in={input_tokens}, out={output_tokens})"
        )

        if not text:
            raise OracleCallFailed(f"Gemini returned an empty response ({self.model})")
        return text
