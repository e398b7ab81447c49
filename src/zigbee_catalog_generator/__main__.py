"""Module entry point for ``python -m zigbee_catalog_generator``."""

from __future__ import annotations

from .cli import main

raise SystemExit(main())
