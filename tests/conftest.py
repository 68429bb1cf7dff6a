"""Pytest configuration for test isolation.

Settings, ``.env`` loading and the default settings path all depend on the
environment and the current working directory. Each test runs from its own
temporary directory with the ``BEANCOUNT_RECORDER_*`` variables cleared so a
developer's local configuration cannot leak into assertions.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("BEANCOUNT_RECORDER_"):
            monkeypatch.delenv(key, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir(parents=True, exist_ok=True)
    monkeypatch.chdir(workdir)
