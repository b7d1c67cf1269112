import logging
import random

from openai import OpenAI

from coachbot.bot.texts import FALLBACK_REPLIES

logger = logging.getLogger(__name__)

PROMPT_VERSION = "coach_v1"

SYSTEM_PROMPT = """
Anda adalah AI coach profesional yang membantu pengguna dengan masalah sehari-hari.
Berikan respon yang empatik, suportif, dan memberikan solusi praktis.
Gunakan bahasa Indonesia yang santun dan mudah dimengerti.
""".strip()


class OpenAIClient:
    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        max_tokens: int = 500,
        temperature: float = 0.7,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client: OpenAI | None = None

    @property
    def client(self) -> OpenAI:
        # created on first use: a missing key fails the first request, not startup
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key or None)
        return self._client

    def complete(
        self,
        system_prompt: str,
        user_message: str,
        *,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        resp = self.client.responses.create(
            model=model or self.model,
            instructions=system_prompt,
            input=user_message,
            max_output_tokens=max_tokens or self.max_tokens,
            temperature=self.temperature if temperature is None else temperature,
        )
        return resp.output_text or ""

    def reply(self, user_message: str) -> str:
        try:
            out = self.complete(SYSTEM_PROMPT, user_message)
        except Exception as e:
            logger.error("Completion failed (model=%s): %r", self.model, e)
            return random.choice(FALLBACK_REPLIES)
        if not out.strip():
            logger.warning("Empty completion (model=%s, prompt=%s)", self.model, PROMPT_VERSION)
            return random.choice(FALLBACK_REPLIES)
        return out
