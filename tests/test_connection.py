"""DSN assembly and the bounded startup readiness wait."""

import psycopg2
import pytest
from psycopg2.extensions import parse_dsn

from config import Settings
from db.connection import DatabaseUnavailable, build_dsn, wait_for_database
from tests.fakes import FakeDatabase, FakePool


def _settings(**overrides):
    values = dict(db_user="root", db_password="r00t", db_host="data", db_connect_attempts=4)
    values.update(overrides)
    return Settings(**values)


def test_dsn_includes_database_name():
    dsn = parse_dsn(build_dsn(_settings(db_name="neighborhood")))

    assert dsn == {
        "user": "root", "password": "r00t", "host": "data",
        "port": "5432", "dbname": "neighborhood",
    }


def test_dsn_omits_empty_database_name():
    assert "dbname" not in parse_dsn(build_dsn(_settings()))


def test_returns_pool_once_database_answers():
    sleeps = []
    calls = []
    db = FakeDatabase()

    def connect(settings):
        calls.append(settings)
        if len(calls) < 3:
            raise psycopg2.OperationalError("could not connect to server")
        return FakePool(db)

    db_pool = wait_for_database(_settings(), connect=connect, sleep=sleeps.append)

    assert isinstance(db_pool, FakePool)
    assert len(calls) == 3
    assert sleeps == [0.2, 0.2]


def test_failed_ping_closes_pool_and_retries():
    db = FakeDatabase()
    pools = []

    def connect(settings):
        p = FakePool(db)
        if not pools:
            db.failures["SELECT 1;"] = psycopg2.OperationalError("starting up")
        pools.append(p)
        return p

    db_pool = wait_for_database(_settings(), connect=connect, sleep=lambda _: None)

    assert db_pool is pools[1]
    assert pools[0].closeall_calls == 1


def test_gives_up_after_configured_attempts():
    sleeps = []

    def connect(settings):
        raise psycopg2.OperationalError("no route to host")

    with pytest.raises(DatabaseUnavailable):
        wait_for_database(_settings(db_connect_attempts=3), connect=connect, sleep=sleeps.append)

    assert len(sleeps) == 2
