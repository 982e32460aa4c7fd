# storefront/services/generation_service.py
import logging
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

GENERATION_TIMEOUT_SECONDS = 5.0
MAX_TOKENS = 200
TEMPERATURE = 0.7
PLACEHOLDER_MIN_LENGTH = 20
ELLIPSIS = "..."

# Chat calls run here so the budget bounds the whole call, not each socket read
_executor = ThreadPoolExecutor(max_workers=16, thread_name_prefix="generation")

SYSTEM_MESSAGE = "You are a creative product description writer. Write engaging, concise descriptions."
PROMPT_TEMPLATE = "Write a compelling 2-3 sentence product description for: {product_name}"


class GenerationError(Exception):
    """The generation service answered, but with nothing usable."""


class ChatService(Protocol):
    def complete(
        self,
        system_message: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
        timeout: float,
    ) -> str: ...


@dataclass(frozen=True)
class GenerationResult:
    """Either a description or an error message, never both."""
    description: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, description: str) -> "GenerationResult":
        return cls(description=description)

    @classmethod
    def failure(cls, error: str) -> "GenerationResult":
        return cls(error=error)


def is_placeholder(description: str) -> bool:
    """A description is a placeholder if it is too short or visibly truncated."""
    return len(description) < PLACEHOLDER_MIN_LENGTH or ELLIPSIS in description


class GenerationClient:
    """
    Decides whether a description needs generating and, if so, asks the chat
    service for one within a bounded time budget. Never retries.
    """

    def __init__(
        self,
        chat: ChatService,
        timeout_seconds: float = GENERATION_TIMEOUT_SECONDS,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self.chat = chat
        self.timeout_seconds = timeout_seconds
        self._monotonic = monotonic

    def generate(self, product_name: str, current_description: str, deadline: float | None = None) -> GenerationResult:
        """
        Returns the current description untouched when it is real, otherwise a
        freshly generated one. `deadline` is an inherited time.monotonic() value;
        the call never runs past it or past the generation budget.
        """
        if not is_placeholder(current_description):
            return GenerationResult.success(current_description)

        timeout = self.timeout_seconds
        if deadline is not None:
            remaining = deadline - self._monotonic()
            if remaining <= 0:
                return GenerationResult.failure("request deadline exceeded before generation")
            timeout = min(timeout, remaining)

        prompt = PROMPT_TEMPLATE.format(product_name=product_name)
        # The SDK timeout is still passed so an abandoned call stops on its own
        future = _executor.submit(
            self.chat.complete,
            system_message=SYSTEM_MESSAGE,
            prompt=prompt,
            max_tokens=MAX_TOKENS,
            temperature=TEMPERATURE,
            timeout=timeout,
        )
        try:
            text = future.result(timeout=timeout)
        except FutureTimeoutError:
            future.cancel()
            logger.error(f"Description generation for '{product_name}' timed out after {timeout:.1f}s")
            return GenerationResult.failure(f"generation timed out after {timeout:.1f}s")
        except GenerationError as e:
            logger.warning(f"No description generated for '{product_name}': {e}")
            return GenerationResult.failure(str(e))
        except Exception as e:
            logger.error(f"Failed to generate description for '{product_name}': {e}")
            return GenerationResult.failure(f"failed to generate description: {e}")

        if not text or not text.strip():
            return GenerationResult.failure("no description generated")

        logger.info(f"Generated description for '{product_name}'")
        return GenerationResult.success(text.strip())
