"""HOMEd ZigBee device catalog generator package."""

from __future__ import annotations

from .cli import main
from .generator import build_catalog, run_catalog
from .model_types import CatalogRun

__all__ = ["CatalogRun", "build_catalog", "main", "run_catalog"]
