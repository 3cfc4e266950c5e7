"""Process bootstrap exit codes and the background HTTP server."""

import json
import logging
import threading
import time
import urllib.error
import urllib.request

import pytest

import main
from db.connection import DatabaseUnavailable
from repositories.neighborhood_repo import NeighborhoodRepository
from server import HTTPServer, create_app
from tests.fakes import FakeDatabase, FakePool
from utils.logger import set_level


@pytest.fixture
def db_env(monkeypatch):
    monkeypatch.setattr("config.load_dotenv", lambda: None)
    monkeypatch.setenv("DB_USER", "root")
    monkeypatch.setenv("DB_PASSWORD", "r00t")
    monkeypatch.setenv("DB_HOST", "data")
    monkeypatch.setenv("HTTP_HOST", "127.0.0.1")
    monkeypatch.setenv("HTTP_PORT", "0")


def test_missing_configuration_exits_1(monkeypatch):
    monkeypatch.setattr("config.load_dotenv", lambda: None)
    for key in ("DB_USER", "DB_PASSWORD", "DB_HOST"):
        monkeypatch.delenv(key, raising=False)

    assert main.run() == 1


def test_unreachable_database_exits_1(db_env, monkeypatch):
    def unavailable(settings):
        raise DatabaseUnavailable("database at data:5432 unreachable after 150 attempts")

    monkeypatch.setattr(main, "wait_for_database", unavailable)

    assert main.run() == 1


class _DeadServer:
    """Stands in for HTTPServer whose serve loop has already crashed."""

    def __init__(self, app, host, port):
        self.stopped = threading.Event()
        self.stopped.set()
        self.error = OSError("address already in use")
        self.shutdown_calls = 0

    def start(self):
        pass

    def shutdown(self):
        self.shutdown_calls += 1


def test_server_failure_exits_1_and_closes_pool(db_env, monkeypatch):
    fake_pool = FakePool(FakeDatabase())
    monkeypatch.setattr(main, "wait_for_database", lambda settings: fake_pool)
    monkeypatch.setattr(main, "create_tables", lambda db_pool: None)
    monkeypatch.setattr(main, "HTTPServer", _DeadServer)
    monkeypatch.setattr(main, "_install_signal_handlers", lambda shutdown: None)

    assert main.run() == 1
    assert fake_pool.closeall_calls == 1


def test_http_server_serves_and_shuts_down():
    repo = NeighborhoodRepository(FakePool(FakeDatabase()))
    server = HTTPServer(create_app(repo), "127.0.0.1", 0)
    server.start()
    try:
        with urllib.request.urlopen(f"http://127.0.0.1:{server.port}/", timeout=5) as response:
            assert response.status == 200
            assert json.loads(response.read()) == {"status": "so healthy right now!"}
    finally:
        server.shutdown()

    assert server.stopped.is_set()
    assert server.error is None
    repo.close()


class _SlowRepository(NeighborhoodRepository):
    """Holds list_houses open long enough for shutdown to start mid-request."""

    def __init__(self, db_pool):
        super().__init__(db_pool)
        self.entered = threading.Event()

    def list_houses(self):
        self.entered.set()
        time.sleep(1)
        return super().list_houses()


def test_shutdown_waits_for_in_flight_requests():
    db = FakeDatabase()
    db.seed_house()
    repo = _SlowRepository(FakePool(db))
    server = HTTPServer(create_app(repo), "127.0.0.1", 0)
    server.start()
    result = {}

    def fetch_houses():
        try:
            with urllib.request.urlopen(f"http://127.0.0.1:{server.port}/houses", timeout=10) as response:
                result["status"] = response.status
        except urllib.error.HTTPError as e:
            result["status"] = e.code

    client = threading.Thread(target=fetch_houses)
    client.start()
    assert repo.entered.wait(5)

    server.shutdown()
    repo.close()
    client.join(10)

    assert result["status"] == 200


def test_set_level_overrides_root_level():
    root = logging.getLogger()
    previous = root.level
    try:
        set_level("debug")
        assert root.level == logging.DEBUG
    finally:
        root.setLevel(previous)
