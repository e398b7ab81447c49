"""Extract device descriptions from parsed category files."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging

from .aggregator import CatalogAggregator
from .json_types import JSONObject, JSONValue, PositionedKey
from .model_types import CatalogEntry
from .positioned_json import parse_json

logger = logging.getLogger(__name__)

_DESCRIPTION_KEY = PositionedKey("description", -1)


class CollectionError(RuntimeError):
    """Raised when a category file cannot be turned into catalog entries."""


class EmptyDocumentError(CollectionError):
    """Raised when a category file has no entries at all."""


class ShapeMismatchError(CollectionError):
    """Raised when a category file is not a mapping of categories."""


class DeviceCatalogCollector:
    """Walk category files and feed their devices into an aggregator."""

    def __init__(self, aggregator: CatalogAggregator) -> None:
        self.aggregator = aggregator

    def collect(self, file_id: str, source_label: str, raw_content: str) -> bool:
        """Collect the devices described in one category file.

        Args:
            file_id (str): File name the entries are grouped and linked under.
            source_label (str): Path or URL used in diagnostics.
            raw_content (str): JSON text of the file.

        Returns:
            bool: ``True`` when the file was collected.
        """
        result = parse_json(raw_content)
        if result.is_error:
            logger.error("failed to parse JSON file `%s`", source_label)
            logger.debug("%s: %s", source_label, result.describe())
            return False

        try:
            categories = _require_categories(result.value)
        except EmptyDocumentError:
            logger.error("the JSON is empty. `%s`", source_label)
            return False
        except ShapeMismatchError:
            logger.debug("skipping `%s`: top-level value is not an object", source_label)
            return False

        self.aggregator.register_file(file_id)
        for category, devices in categories.items():
            if isinstance(devices, str) or not isinstance(devices, Sequence):
                continue
            for device in devices:
                if isinstance(device, Mapping):
                    self._collect_device(file_id, source_label, category, device)
        return True

    def _collect_device(
        self,
        file_id: str,
        source_label: str,
        category: PositionedKey,
        device: JSONObject,
    ) -> None:
        for key, value in device.items():
            if key != _DESCRIPTION_KEY:
                continue
            if not isinstance(value, str):
                logger.warning(
                    "ignoring non-string description in category `%s` at line %s of `%s`",
                    category,
                    key.line,
                    source_label,
                )
                return
            self.aggregator.add_entry(file_id, CatalogEntry(name=value, line=key.line or 0))
            return


def _require_categories(value: JSONValue) -> JSONObject:
    if not _entry_count(value):
        raise EmptyDocumentError("document has no entries")
    if not isinstance(value, Mapping):
        raise ShapeMismatchError(f"expected an object, got {type(value).__name__}")
    return value


def _entry_count(value: JSONValue) -> int:
    if isinstance(value, (Mapping, list)):
        return len(value)
    return 0
