# storefront/services/openai_service.py

import logging
from openai import AzureOpenAI, OpenAI
from ..config import Config
from .generation_service import GenerationError

logger = logging.getLogger(__name__)


def create_openai_client() -> OpenAI:
    """
    Builds an Azure OpenAI client when an Azure endpoint is configured, otherwise
    a plain OpenAI client. SDK retries are off; a failed call falls back instead.
    """
    if Config.AZURE_OPENAI_ENDPOINT:
        client = AzureOpenAI(
            azure_endpoint=Config.AZURE_OPENAI_ENDPOINT,
            api_key=Config.AZURE_OPENAI_API_KEY or Config.OPENAI_API_KEY,
            api_version=Config.AZURE_OPENAI_API_VERSION,
            max_retries=0,
        )
        logger.info("Azure OpenAI client initialized successfully.")
        return client

    client = OpenAI(api_key=Config.OPENAI_API_KEY, max_retries=0)
    logger.info("OpenAI client initialized successfully.")
    return client


class OpenAIChatService:
    """Chat completion call against OpenAI or an Azure OpenAI deployment."""

    def __init__(self, client: OpenAI, model: str):
        self.client = client
        self.model = model

    def complete(self, system_message: str, prompt: str, max_tokens: int, temperature: float, timeout: float) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_message},
                {"role": "user", "content": prompt},
            ],
            max_tokens=max_tokens,
            temperature=temperature,
            timeout=timeout,
        )

        if not response.choices:
            raise GenerationError("no description generated: response has no choices")
        message = response.choices[0].message
        if message is None or not message.content:
            raise GenerationError("no description generated: first choice has no content")
        return message.content


def create_chat_service() -> OpenAIChatService:
    model = Config.AZURE_OPENAI_DEPLOYMENT if Config.AZURE_OPENAI_ENDPOINT else Config.OPENAI_MODEL
    return OpenAIChatService(create_openai_client(), model)
