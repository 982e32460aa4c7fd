from types import SimpleNamespace

import pytest
from prometheus_client import CollectorRegistry

from storefront.services.description_cache import CacheError
from storefront.services.metrics_service import MetricsRecorder


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeChatService:
    """Returns queued outcomes in order; an Exception outcome is raised."""

    def __init__(self, outcomes=None, default="A handsome widget, built to last. Owners love it."):
        self.outcomes = list(outcomes or [])
        self.default = default
        self.calls = []

    def complete(self, system_message, prompt, max_tokens, temperature, timeout):
        self.calls.append(
            {
                "system_message": system_message,
                "prompt": prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "timeout": timeout,
            }
        )
        outcome = self.outcomes.pop(0) if self.outcomes else self.default
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeDurableStore:
    def __init__(self):
        self.data = {}
        self.get_calls = []
        self.set_calls = []
        self.fail_get = False
        self.fail_set = False

    def get(self, key):
        self.get_calls.append(key)
        if self.fail_get:
            raise CacheError("store unreachable")
        return self.data.get(key)

    def set(self, key, value, ttl_seconds):
        self.set_calls.append((key, value, ttl_seconds))
        if self.fail_set:
            raise CacheError("store unreachable")
        self.data[key] = value


class FakeQuery:
    """Records a Supabase query builder chain and returns canned rows."""

    def __init__(self, table):
        self.table = table
        self.ops = []

    def __getattr__(self, name):
        def op(*args, **kwargs):
            self.ops.append((name, args, kwargs))
            return self
        return op

    def execute(self):
        self.table.client.executed.append((self.table.name, self.ops))
        if self.table.client.error:
            raise self.table.client.error
        return SimpleNamespace(data=self.table.client.rows.get(self.table.name, []))


class FakeTable:
    def __init__(self, client, name):
        self.client = client
        self.name = name

    def __getattr__(self, name):
        query = FakeQuery(self)
        return getattr(query, name)


class FakeSupabaseClient:
    def __init__(self, rows=None, error=None):
        self.rows = rows or {}
        self.error = error
        self.executed = []

    def table(self, name):
        return FakeTable(self, name)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def metrics():
    return MetricsRecorder(registry=CollectorRegistry())


@pytest.fixture
def chat():
    return FakeChatService()


@pytest.fixture
def durable_store():
    return FakeDurableStore()
