from __future__ import annotations

import socket
from pathlib import Path

import pytest
from hypothesis import settings
from hypothesis.database import DirectoryBasedExampleDatabase

from stripcheck.core.context import RunContext

_ALLOWED_MARKERS = {"unit", "integration", "slow"}

_ROOT = Path(__file__).resolve().parents[1]
_HYPOTHESIS_DB = _ROOT / "artifacts/stripcheck/.hypothesis/examples"
settings.register_profile("stripcheck", database=DirectoryBasedExampleDatabase(_HYPOTHESIS_DB))
settings.load_profile("stripcheck")


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        names = {mark.name for mark in item.iter_markers()}
        if not names.intersection(_ALLOWED_MARKERS):
            item.add_marker("unit")


@pytest.fixture(autouse=True)
def no_network_for_unit(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("slow"):
        return

    def _blocked(*_args: object, **_kwargs: object) -> socket.socket:
        raise RuntimeError("network disabled in unit tests")

    def _blocked_connect(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError("network disabled in unit tests")

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket.socket, "connect", _blocked_connect)


@pytest.fixture(autouse=True)
def clean_stripcheck_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("STRIPCHECK_CONFIG", "STRIPCHECK_BUILD_TOOL", "RUN_ID"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def ctx() -> RunContext:
    return RunContext.from_args("pytest-run")


@pytest.fixture
def contract_repo(tmp_path: Path) -> Path:
    repo = tmp_path / "proj"
    repo.mkdir()
    (repo / "Cargo.toml").write_text('[package]\nname = "soroban-eth-abi"\nversion = "0.0.0"\n', encoding="utf-8")
    return repo
