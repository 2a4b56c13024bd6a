import importlib

import pytest
from fastapi.testclient import TestClient


def _setup_app():
    import app.datatable.core.config as config
    import app.datatable.routers.health as health
    import app.datatable.routers.tables as tables
    import app.datatable.api as api
    import app.main as main

    for module in (config, health, tables, api, main):
        importlib.reload(module)

    return main.create_app()


@pytest.fixture()
def make_client(monkeypatch):
    def _make(**env) -> TestClient:
        for key, value in env.items():
            monkeypatch.setenv(key, str(value))
        return TestClient(_setup_app())

    return _make


@pytest.fixture()
def client(make_client):
    with make_client() as client:
        yield client
