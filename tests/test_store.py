import asyncio
import json

import pytest
from shopify_admin_api.core.store import (
    EXCHANGE_TOKEN_KEY,
    FileCredentialStore,
    InMemoryCredentialStore,
)


@pytest.fixture(params=["memory", "file"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return InMemoryCredentialStore()
    return FileCredentialStore(tmp_path / "nested" / "db.json")


def test_get_set_exists_clear(any_store):
    assert any_store.get("shop") is None
    assert not any_store.exists("shop")

    any_store.set("shop", "a.example.com")
    assert any_store.exists("shop")
    assert any_store.get("shop") == "a.example.com"

    any_store.clear("shop")
    assert not any_store.exists("shop")


def test_set_none_removes_key(any_store):
    any_store.set(EXCHANGE_TOKEN_KEY, "tok")
    any_store.set(EXCHANGE_TOKEN_KEY, None)
    assert not any_store.exists(EXCHANGE_TOKEN_KEY)


def test_get_with_fallback_computes_and_stores(any_store):
    calls = []

    def fallback():
        calls.append(1)
        return "computed"

    assert any_store.get("k", fallback) == "computed"
    assert any_store.get("k", fallback) == "computed"
    assert calls == [1]
    assert any_store.exists("k")


def test_get_with_fallback_returning_none_stores_nothing(any_store):
    assert any_store.get("k", lambda: None) is None
    assert not any_store.exists("k")


@pytest.mark.asyncio
async def test_override_sets_then_clears(any_store):
    any_store.set(EXCHANGE_TOKEN_KEY, "stored")

    async with any_store.override(EXCHANGE_TOKEN_KEY, "explicit"):
        assert any_store.get(EXCHANGE_TOKEN_KEY) == "explicit"

    # cleared, not restored to the previous value
    assert not any_store.exists(EXCHANGE_TOKEN_KEY)


@pytest.mark.asyncio
async def test_override_clears_on_exception(any_store):
    with pytest.raises(RuntimeError):
        async with any_store.override(EXCHANGE_TOKEN_KEY, "explicit"):
            raise RuntimeError("boom")

    assert not any_store.exists(EXCHANGE_TOKEN_KEY)


@pytest.mark.asyncio
async def test_guard_waits_for_active_override():
    store = InMemoryCredentialStore({EXCHANGE_TOKEN_KEY: "stored"})
    seen = []

    async def override():
        async with store.override(EXCHANGE_TOKEN_KEY, "explicit"):
            await asyncio.sleep(0.01)

    async def read():
        async with store.guard(EXCHANGE_TOKEN_KEY):
            seen.append(store.get(EXCHANGE_TOKEN_KEY))

    await asyncio.gather(override(), read())

    assert seen == [None]


@pytest.mark.asyncio
async def test_concurrent_overrides_are_serialized():
    store = InMemoryCredentialStore()
    seen = []

    async def use(token):
        async with store.override(EXCHANGE_TOKEN_KEY, token):
            await asyncio.sleep(0)
            seen.append((token, store.get(EXCHANGE_TOKEN_KEY)))
            await asyncio.sleep(0)
            seen.append((token, store.get(EXCHANGE_TOKEN_KEY)))

    await asyncio.gather(use("one"), use("two"))

    assert all(token == value for token, value in seen)
    assert [t for t, _ in seen] in (
        ["one", "one", "two", "two"],
        ["two", "two", "one", "one"],
    )


def test_file_store_persists_across_instances(tmp_path):
    path = tmp_path / "db.json"
    FileCredentialStore(path).set("shop", "a.example.com")

    reopened = FileCredentialStore(path)
    assert reopened.get("shop") == "a.example.com"
    assert json.loads(path.read_text()) == {"shop": "a.example.com"}


def test_file_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "db.json"
    path.write_text("{not json")

    store = FileCredentialStore(path)
    assert store.get("shop") is None
    store.set("shop", "b.example.com")
    assert FileCredentialStore(path).get("shop") == "b.example.com"
