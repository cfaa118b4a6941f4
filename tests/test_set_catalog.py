import httpx
import pytest

from config import Settings
from sna.constants import ALIAS_RELEASE_DATE, SET_ALIASES
from sna.errors import CatalogUnavailable
from sna.services import set_catalog
from sna.services.set_catalog import SetCatalogService, build_set_records, fetch_scryfall_sets

from conftest import RAW_SETS, FakeClock, FakeFetcher

DAY = 24 * 3600


def test_build_set_records_lowercases_codes_and_appends_aliases():
    records = build_set_records(RAW_SETS + [{"code": "xyz", "name": None, "released_at": None}])

    assert records[0].code == "dom"
    assert records[0].normalized_name == "dominaria"
    assert records[len(RAW_SETS)].released_at == "0000-00-00"
    aliases = records[-len(SET_ALIASES):]
    assert [(r.code, r.name) for r in aliases] == SET_ALIASES
    assert all(r.released_at == ALIAS_RELEASE_DATE for r in aliases)


@pytest.mark.asyncio
async def test_catalog_is_cached_until_ttl_expires():
    clock = FakeClock()
    fetcher = FakeFetcher()
    service = SetCatalogService(fetcher=fetcher, ttl_seconds=DAY, timer=clock)

    first = await service.get_catalog()
    clock.advance(DAY - 60)
    second = await service.get_catalog()

    assert fetcher.calls == 1
    assert second is first

    clock.advance(120)
    third = await service.get_catalog()

    assert fetcher.calls == 2
    assert third is not first
    assert len(third) == len(RAW_SETS) + len(SET_ALIASES)


@pytest.mark.asyncio
async def test_failed_refresh_propagates_and_keeps_existing_cache():
    clock = FakeClock()
    fetcher = FakeFetcher()
    service = SetCatalogService(fetcher=fetcher, ttl_seconds=DAY, timer=clock)
    await service.get_catalog()
    fetched_at = service.fetched_at

    clock.advance(DAY + 1)
    fetcher.error = CatalogUnavailable("boom")
    with pytest.raises(CatalogUnavailable):
        await service.get_catalog()

    assert service.fetched_at == fetched_at

    fetcher.error = None
    records = await service.get_catalog()
    assert fetcher.calls == 3
    assert records[0].code == "dom"


@pytest.mark.asyncio
async def test_cache_info_reports_state():
    service = SetCatalogService(fetcher=FakeFetcher(), ttl_seconds=DAY, timer=FakeClock())
    assert service.cache_info()["cached"] is False

    await service.get_catalog()
    info = service.cache_info()

    assert info["cached"] is True
    assert info["set_count"] == len(RAW_SETS) + len(SET_ALIASES)
    assert info["fetched_at"] is not None


def _mock_client_factory(handler):
    def factory(settings=None):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return factory


@pytest.mark.asyncio
async def test_fetch_scryfall_sets_returns_data_list(monkeypatch):
    def handler(request):
        assert request.url.path == "/sets"
        return httpx.Response(200, json={"object": "list", "data": RAW_SETS})

    monkeypatch.setattr(set_catalog, "get_external_client", _mock_client_factory(handler))

    data = await fetch_scryfall_sets("https://api.scryfall.com/sets")
    assert data == RAW_SETS


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(503, json={"object": "error"}),
        httpx.Response(200, json={"object": "list"}),
        httpx.Response(200, content=b"not json"),
    ],
)
async def test_fetch_scryfall_sets_raises_catalog_unavailable(monkeypatch, response):
    monkeypatch.setattr(set_catalog, "get_external_client", _mock_client_factory(lambda request: response))

    with pytest.raises(CatalogUnavailable):
        await fetch_scryfall_sets("https://api.scryfall.com/sets")


@pytest.mark.asyncio
async def test_non_object_set_entries_are_skipped():
    service = SetCatalogService(fetcher=FakeFetcher(raw_sets=["oops", None, RAW_SETS[0]]), timer=FakeClock())

    records = await service.get_catalog()

    assert [r.code for r in records] == ["dom"] + [code for code, _ in SET_ALIASES]


@pytest.mark.asyncio
async def test_fetch_scryfall_sets_wraps_transport_errors(monkeypatch):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    monkeypatch.setattr(set_catalog, "get_external_client", _mock_client_factory(handler))

    with pytest.raises(CatalogUnavailable):
        await fetch_scryfall_sets("https://api.scryfall.com/sets")


@pytest.mark.asyncio
async def test_fetch_scryfall_sets_uses_injected_settings(monkeypatch):
    seen = {}

    def factory(settings=None):
        seen["settings"] = settings
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    def handler(request):
        seen["url"] = str(request.url)
        return httpx.Response(200, json={"data": RAW_SETS})

    custom = Settings(scryfall_sets_url="https://mirror.example/sets", _env_file=None)
    monkeypatch.setattr(set_catalog, "get_external_client", factory)

    await fetch_scryfall_sets(settings=custom)

    assert seen["settings"] is custom
    assert seen["url"] == "https://mirror.example/sets"
