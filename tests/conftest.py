"""Pytest configuration and fixtures."""

import json
import stat
from collections.abc import Callable
from pathlib import Path

import pytest

from spinup.config import get_settings
from spinup.core.events import BaseEvent, EventDispatcher

OVERRIDE_VARIABLES = (
    "PACKAGE_MANAGER",
    "INSTALL_COMMAND",
    "BUILD_COMMAND",
    "BUILD_SCRIPT",
    "DEPLOY_COMMAND",
    "DEPLOY_TOOL",
    "DEPLOY_ACTION",
    "CLOUDFLARE_API_TOKEN",
    "CLOUDFLARE_ACCOUNT_ID",
    "DEPLOY_WEBHOOK_URL",
    "DEPLOY_WEBHOOK_TIMEOUT",
    "LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Isolate tests from the caller's overrides and any .env file."""
    for name in OVERRIDE_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def dispatcher() -> EventDispatcher:
    """Create a fresh dispatcher."""
    return EventDispatcher()


@pytest.fixture
def recorded_events(dispatcher: EventDispatcher) -> list[BaseEvent]:
    """Every event dispatched through ``dispatcher``, in order."""
    events: list[BaseEvent] = []
    dispatcher.subscribe(events.append)
    return events


@pytest.fixture
def repo_dir(tmp_path: Path) -> Path:
    """A minimal Next.js repository with a build script."""
    repo = tmp_path / "repo"
    repo.mkdir()
    package_json = {
        "name": "test-project",
        "scripts": {
            "dev": "next dev",
            "build": "next build",
            "start": "next start",
        },
    }
    (repo / "package.json").write_text(json.dumps(package_json))
    return repo


@pytest.fixture
def make_tool(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory for executable shell scripts standing in for npm/npx."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()

    def _make(name: str, body: str) -> Path:
        script = bin_dir / name
        script.write_text(f"#!/bin/sh\n{body}\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make
