import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app import app
from config import Settings
from sna.dependencies import Services
from sna.instructions import get_instruction_template
from sna.services.converter import ConversionService
from sna.services.licenses import LicenseStore
from sna.services.payments import PaymentGateway, PaymentWebhookService
from sna.services.rate_limiter import RateLimiter
from sna.services.set_catalog import SetCatalogService

TEST_LICENSE = "TEST-1234-5678-ABCD"
WEBHOOK_SECRET = "whsec_test_secret"

RAW_SETS = [
    {"code": "DOM", "name": "Dominaria", "released_at": "2018-04-27"},
    {"code": "cmm", "name": "Commander Masters", "released_at": "2023-08-04"},
    {"code": "cma", "name": "Commander Anthology", "released_at": "2017-06-09"},
    {"code": "mh2", "name": "Modern Horizons 2", "released_at": "2021-06-18"},
    {"code": "lci", "name": "The Lost Caverns of Ixalan", "released_at": "2023-11-17"},
]


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCompletion:
    def __init__(self, reply: str = "  t:dinosaur c:u \n", error: Exception = None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def complete(self, instructions, user_text, provider=None):
        self.calls.append({"instructions": instructions, "user_text": user_text, "provider": provider})
        if self.error is not None:
            raise self.error
        return self.reply.strip()


class FakeFetcher:
    def __init__(self, raw_sets=None, error: Exception = None):
        self.raw_sets = RAW_SETS if raw_sets is None else raw_sets
        self.error = error
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.raw_sets)


def make_services(
    clock=None,
    completion=None,
    fetcher=None,
    max_requests: int = 60,
    window_seconds: float = 3600,
    allow_unverified: bool = False,
) -> Services:
    clock = clock or FakeClock()
    licenses = LicenseStore(seed_keys=[TEST_LICENSE])
    rate_limiter = RateLimiter(max_requests=max_requests, window_seconds=window_seconds, timer=clock)
    catalog = SetCatalogService(fetcher=fetcher or FakeFetcher(), ttl_seconds=24 * 3600, timer=clock)
    completion = completion or FakeCompletion()
    converter = ConversionService(
        licenses=licenses,
        rate_limiter=rate_limiter,
        catalog=catalog,
        completion=completion,
        instructions=get_instruction_template(),
    )
    gateway = PaymentGateway("sk_test_dummy", WEBHOOK_SECRET)
    webhooks = PaymentWebhookService(gateway, licenses, mailer=None, allow_unverified=allow_unverified)
    return Services(
        licenses=licenses,
        rate_limiter=rate_limiter,
        catalog=catalog,
        completion=completion,
        converter=converter,
        gateway=gateway,
        webhooks=webhooks,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def services(clock):
    return make_services(clock=clock)


@pytest.fixture
def client(services):
    """TestClient whose app runs on isolated services."""
    original = app.state.services
    app.state.services = services
    try:
        yield TestClient(app)
    finally:
        app.state.services = original


@pytest.fixture
def test_settings():
    return Settings(openai_api_key="sk-openai", anthropic_api_key="sk-ant", _env_file=None)
