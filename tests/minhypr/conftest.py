"""Shared fixtures for minhypr unit tests."""

import os
import sys
from unittest.mock import AsyncMock, Mock

import pytest

sys.path.insert(0, os.path.dirname(__file__))

from fixtures.fake_capture import FakeCapture
from fixtures.fake_compositor import FakeCompositor

from minhypr.core.config import MinhyprConfig
from minhypr.core.engine import MinimizationEngine
from minhypr.core.store import StateStore


@pytest.fixture
def config(tmp_path):
    """Configuration rooted in a temporary directory."""
    return MinhyprConfig(config_dir=tmp_path / "minhypr", waybar_signal=None)


@pytest.fixture
def store(config):
    return StateStore(config.state_file, config.lock_file, lock_timeout=2.0)


@pytest.fixture
def compositor():
    return FakeCompositor()


@pytest.fixture
def capture(config):
    return FakeCapture(config.preview_dir)


@pytest.fixture
def notifier():
    notifier = Mock()
    notifier.notify = AsyncMock()
    return notifier


@pytest.fixture
def engine(store, compositor, capture, config, notifier):
    return MinimizationEngine(store, compositor, capture=capture, config=config, notifier=notifier)
