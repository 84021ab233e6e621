"""Shared fixtures: every test starts without installed runtime state."""

import pytest

from lull import runtime


@pytest.fixture(autouse=True)
def _clean_runtime():
    runtime.teardown()
    yield
    runtime.teardown()
