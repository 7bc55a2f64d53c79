# tests/test_app.py
import asyncio
import signal

import pytest
from fastapi.testclient import TestClient

from product_api import main
from product_api.config import Settings
from product_api.database import MemoryProductStore, MongoProductStore
from product_api.errors import ConfigError, InternalError
from product_api.main import create_app


class BrokenStore(MemoryProductStore):
    async def find(self, query):
        raise InternalError("connection reset by peer")

    async def find_by_id(self, product_id):
        raise RuntimeError("cursor exploded")


def test_requests_rejected_until_store_ready():
    # never connected
    client = TestClient(create_app(store=MongoProductStore("mongodb://localhost:27017")))
    for path in ("/", "/api/products", "/does-not-exist"):
        r = client.get(path)
        assert r.status_code == 503
        assert r.json() == {"error": "Database not ready yet. Try again in a moment."}


def test_store_failure_is_500_without_detail():
    client = TestClient(create_app(store=BrokenStore()))
    r = client.get("/api/products")
    assert r.status_code == 500
    assert r.json() == {"error": "Server error"}


def test_unexpected_exception_is_500_without_detail():
    client = TestClient(create_app(store=BrokenStore()), raise_server_exceptions=False)
    r = client.get("/api/products/0123456789abcdef01234567")
    assert r.status_code == 500
    assert r.json() == {"error": "Server error"}


def test_validation_runs_before_a_failing_store():
    client = TestClient(create_app(store=BrokenStore()))
    assert client.get("/api/products?minPrice=cheap").status_code == 400


def test_lifespan_connects_and_serves():
    with TestClient(create_app(store=MemoryProductStore())) as client:
        assert client.get("/api/products").json() == {"count": 0, "products": []}


def test_failed_connection_shuts_server_down(monkeypatch):
    async def failing():
        raise RuntimeError("no route to host")

    async def run():
        task = asyncio.create_task(failing())
        with pytest.raises(RuntimeError):
            await task
        return task

    task = asyncio.run(run())
    sent = []
    monkeypatch.setattr(main.os, "kill", lambda pid, sig: sent.append(sig))
    main._on_connect_done(task)
    assert sent == [signal.SIGTERM]


def test_create_app_builds_store_from_settings():
    app = create_app(Settings(store_backend="memory"))
    assert isinstance(app.state.store, MemoryProductStore)

    app = create_app(Settings(mongo_uri="mongodb://db:27017", db_name="d", collection_name="c"))
    store = app.state.store
    assert isinstance(store, MongoProductStore)
    assert (store.uri, store.db_name, store.collection_name) == ("mongodb://db:27017", "d", "c")
    assert not store.ready


# ---------------------------
# Settings
# ---------------------------
def test_settings_defaults():
    s = Settings.from_env({"MONGO_URI": "mongodb://localhost:27017"})
    assert s.port == 3000
    assert s.db_name == "shop"
    assert s.collection_name == "products"
    assert s.store_backend == "mongo"


def test_settings_from_env_values():
    s = Settings.from_env({
        "MONGO_URI": "mongodb://m", "PORT": "8085", "DB_NAME": "catalog",
        "COLLECTION_NAME": "items", "LOG_LEVEL": "debug",
    })
    assert (s.port, s.db_name, s.collection_name, s.log_level) == (8085, "catalog", "items", "DEBUG")


def test_missing_mongo_uri_is_fatal():
    with pytest.raises(ConfigError):
        Settings.from_env({})
    with pytest.raises(ConfigError):
        Settings.from_env({"MONGO_URI": "   "})


def test_memory_backend_needs_no_uri():
    assert Settings.from_env({"STORE_BACKEND": "memory"}).mongo_uri is None


@pytest.mark.parametrize("env", [
    {"MONGO_URI": "mongodb://m", "PORT": "eighty"},
    {"STORE_BACKEND": "redis"},
    {"STORE_BACKEND": "memory", "LOG_LEVEL": "chatty"},
])
def test_bad_settings(env):
    with pytest.raises(ConfigError):
        Settings.from_env(env)


def test_run_exits_without_mongo_uri(monkeypatch):
    monkeypatch.delenv("MONGO_URI", raising=False)
    monkeypatch.setenv("STORE_BACKEND", "mongo")
    with pytest.raises(SystemExit) as exc:
        main.run()
    assert exc.value.code == 1


def test_error_responses_carry_cors_headers():
    origin = {"Origin": "http://shop.example"}

    not_ready = TestClient(create_app(store=MongoProductStore("mongodb://localhost:27017")))
    r = not_ready.get("/api/products", headers=origin)
    assert r.status_code == 503
    assert r.headers["access-control-allow-origin"] == "*"

    broken = TestClient(create_app(store=BrokenStore()))
    r = broken.get("/api/products", headers=origin)
    assert r.status_code == 500
    assert r.headers["access-control-allow-origin"] == "*"
