"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Iterator
import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Drop handlers the CLI installs so they never outlive captured streams."""
    package_logger = logging.getLogger("zigbee_catalog_generator")
    yield
    package_logger.handlers = []
    package_logger.setLevel(logging.NOTSET)
