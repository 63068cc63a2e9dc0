"""
Test configuration — repo root on sys.path plus fakes for the outbound clients.

No test talks to the network: completions, geocoding and the document store
are all replaced by the fakes below.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pytest

REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from app.config import Settings  # noqa: E402
from importer.geocode import Coordinates, ZERO  # noqa: E402


class FakeCompletions:
    """Returns canned page texts in order; an exception in the list is raised instead."""

    def __init__(self, responses: List[Union[str, Exception]]):
        self.responses = list(responses)
        self.prompts: List[str] = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.responses:
            return ""
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeGeocoder:
    def __init__(self, known: Optional[Dict[str, Coordinates]] = None):
        self.known = known or {}
        self.calls: List[str] = []

    def geocode(self, location: Optional[str]) -> Coordinates:
        self.calls.append(location)
        return self.known.get(location, ZERO)


class FakeStore:
    def __init__(self, fail_for: Optional[set] = None):
        self.docs: List[Dict[str, Any]] = []
        self.fail_for = fail_for or set()

    def upsert_company(self, doc: Dict[str, Any]) -> bool:
        if doc["company_name"] in self.fail_for:
            return False
        self.docs.append(doc)
        return True


def make_settings(**overrides) -> Settings:
    values = dict(
        xai_api_key="test-key",
        xai_model="grok-test",
        xai_base_url="https://api.x.ai/v1",
        default_timeout_ms=300_000,
        stub_mode=False,
        geocoding_api_key="",
        mongo_url="",
        mongo_db_name="tabarnam-db",
        mongo_collection_name="companies_ingest",
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()
