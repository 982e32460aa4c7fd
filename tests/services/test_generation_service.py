import time

import pytest

from conftest import FakeChatService, FakeClock
from storefront.services.generation_service import (
    GENERATION_TIMEOUT_SECONDS,
    MAX_TOKENS,
    SYSTEM_MESSAGE,
    TEMPERATURE,
    GenerationClient,
    GenerationError,
    GenerationResult,
    is_placeholder,
)

REAL_DESCRIPTION = "A sturdy oak bookshelf with five adjustable shelves."


@pytest.mark.parametrize(
    "description",
    ["", "short", "x" * 19, "A lovely hat that...", "...", "Fifty characters of text, then it trails off... ok"],
)
def test_placeholders(description):
    assert is_placeholder(description)


@pytest.mark.parametrize("description", ["x" * 20, "y" * 50, REAL_DESCRIPTION])
def test_real_descriptions(description):
    assert not is_placeholder(description)


def test_real_description_returned_without_calling_service(chat):
    client = GenerationClient(chat)

    result = client.generate("Bookshelf", REAL_DESCRIPTION)

    assert result == GenerationResult.success(REAL_DESCRIPTION)
    assert chat.calls == []


def test_placeholder_triggers_bounded_generation(chat):
    client = GenerationClient(chat)

    result = client.generate("Top Hat", "A hat...")

    assert result.ok
    assert result.description == chat.default
    call = chat.calls[0]
    assert call["system_message"] == SYSTEM_MESSAGE
    assert call["prompt"] == "Write a compelling 2-3 sentence product description for: Top Hat"
    assert call["max_tokens"] == MAX_TOKENS == 200
    assert call["temperature"] == TEMPERATURE == 0.7
    assert call["timeout"] == GENERATION_TIMEOUT_SECONDS == 5.0


def test_transport_error_becomes_failure_result():
    chat = FakeChatService(outcomes=[ConnectionError("connection reset")])
    result = GenerationClient(chat).generate("Top Hat", "short")

    assert not result.ok
    assert "connection reset" in result.error
    assert result.description is None


def test_empty_response_becomes_failure_result():
    chat = FakeChatService(outcomes=[GenerationError("no description generated")])
    result = GenerationClient(chat).generate("Top Hat", "short")

    assert not result.ok
    assert result.error == "no description generated"


def test_blank_text_becomes_failure_result():
    chat = FakeChatService(outcomes=["   "])
    result = GenerationClient(chat).generate("Top Hat", "short")

    assert not result.ok


def test_failures_are_not_retried():
    chat = FakeChatService(outcomes=[TimeoutError("timed out"), "never reached"])
    GenerationClient(chat).generate("Top Hat", "short")

    assert len(chat.calls) == 1


def test_inherited_deadline_shortens_timeout(chat):
    monotonic = FakeClock(now=100.0)
    client = GenerationClient(chat, monotonic=monotonic)

    client.generate("Top Hat", "short", deadline=102.0)

    assert chat.calls[0]["timeout"] == pytest.approx(2.0)


def test_distant_deadline_keeps_generation_budget(chat):
    monotonic = FakeClock(now=100.0)
    client = GenerationClient(chat, monotonic=monotonic)

    client.generate("Top Hat", "short", deadline=160.0)

    assert chat.calls[0]["timeout"] == GENERATION_TIMEOUT_SECONDS


def test_expired_deadline_skips_the_call(chat):
    monotonic = FakeClock(now=100.0)
    client = GenerationClient(chat, monotonic=monotonic)

    result = client.generate("Top Hat", "short", deadline=99.0)

    assert not result.ok
    assert chat.calls == []


class SlowChatService:
    """Blocks for the whole timeout it is given, then times out."""

    def complete(self, system_message, prompt, max_tokens, temperature, timeout):
        time.sleep(timeout)
        raise TimeoutError(f"timed out after {timeout}s")


def test_slow_service_returns_within_budget():
    client = GenerationClient(SlowChatService(), timeout_seconds=0.2)

    started = time.monotonic()
    result = client.generate("Top Hat", "short")

    assert not result.ok
    assert time.monotonic() - started < 1.0


class StallingChatService:
    """Ignores its timeout, like a server trickling bytes under the read timeout."""

    def __init__(self, stall=2.0):
        self.stall = stall

    def complete(self, system_message, prompt, max_tokens, temperature, timeout):
        time.sleep(self.stall)
        return "Arrived far too late to be used."


def test_budget_bounds_total_time_even_when_service_ignores_timeout():
    client = GenerationClient(StallingChatService(stall=2.0), timeout_seconds=0.2)

    started = time.monotonic()
    result = client.generate("Top Hat", "short")

    assert not result.ok
    assert "timed out" in result.error
    assert time.monotonic() - started < 1.0
