"""Shared test fixtures and helpers for facemetric tests."""

import importlib.util
import sys
from pathlib import Path

import pytest

# Load helpers module from the tests directory using importlib to avoid
# polluting sys.path.
_helpers_path = Path(__file__).resolve().parent / "helpers.py"
_spec = importlib.util.spec_from_file_location("helpers", _helpers_path)
_helpers = importlib.util.module_from_spec(_spec)
sys.modules["helpers"] = _helpers
_spec.loader.exec_module(_helpers)

from helpers import MockBackend, SplitSampler, make_face, make_image  # noqa: E402


@pytest.fixture
def image():
    return make_image()


@pytest.fixture
def face():
    return make_face()


@pytest.fixture
def sampler():
    return SplitSampler(120.0, 110.0)


@pytest.fixture
def backend():
    return MockBackend([make_face()])
