# storefront/services/gemini_service.py
import logging
from google import genai
from google.genai import types
from ..config import Config
from .generation_service import GenerationError

logger = logging.getLogger(__name__)


class GeminiChatService:
    """Single-turn text generation with Google Gemini."""

    def __init__(self, client: genai.Client, model: str):
        self.client = client
        self.model = model

    def complete(self, system_message: str, prompt: str, max_tokens: int, temperature: float, timeout: float) -> str:
        response = self.client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                system_instruction=system_message,
                max_output_tokens=max_tokens,
                temperature=temperature,
                thinking_config=types.ThinkingConfig(thinking_budget=0),
                # HttpOptions takes milliseconds
                http_options=types.HttpOptions(timeout=max(1, int(timeout * 1000))),
            ),
        )
        if not response.text:
            raise GenerationError("Gemini response is empty.")
        return response.text


def create_chat_service() -> GeminiChatService:
    client = genai.Client(api_key=Config.GEMINI_API_KEY)
    logger.info("Successfully configured Google Gemini client.")
    return GeminiChatService(client, Config.GEMINI_MODEL)
