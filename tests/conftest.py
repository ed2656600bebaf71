"""Global pytest configuration.

Registers the shared graph fixtures from `tests.algorithms.sample_graphs` as a
plugin so every test folder can request them by name. Pytest imports the
plugin itself, so assertion rewriting applies inside fixture helpers.
"""

from __future__ import annotations

import pytest

from graphengine.logging import reset_logging

pytest_plugins: list[str] = ["tests.algorithms.sample_graphs"]


@pytest.fixture(autouse=True)
def _isolate_package_logging():
    """Keep log level changes made by one test from leaking into the next."""
    yield
    reset_logging()
