"""Dataset text providers and demo variant loading.

The pipeline only needs raw JSON text for a named file. Where that text comes
from (bundled package data, a folder on disk, an uploaded file held in
memory) is hidden behind :class:`TextProvider`.
"""

from __future__ import annotations

import logging
import os
from importlib import resources
from pathlib import Path
from typing import Mapping, Protocol

from .models import Dataset
from .parsing import DatasetNotFoundError, parse_dataset

logger = logging.getLogger(__name__)

DEFAULT_VARIANT = os.getenv("PULSEWRAP_DEFAULT_VARIANT", "A")
VARIANTS = ("A", "B")


class TextProvider(Protocol):
    def load_text(self, name: str) -> str:
        """Return the text stored under ``name`` or raise :class:`DatasetNotFoundError`."""


class PackagedTextProvider:
    """Read the demo datasets bundled in ``pulsewrap/data``."""

    def __init__(self, package: str = "pulsewrap", folder: str = "data") -> None:
        self.package = package
        self.folder = folder

    def load_text(self, name: str) -> str:
        resource = resources.files(self.package) / self.folder / name
        if not resource.is_file():
            raise DatasetNotFoundError(f"Dataset file not found: {name}", stage="load")
        return resource.read_text(encoding="utf-8")


class DirectoryTextProvider:
    """Read dataset files from a directory on disk."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def load_text(self, name: str) -> str:
        path = self.root / name
        if not path.is_file():
            raise DatasetNotFoundError(f"Dataset file not found: {path}", stage="load")
        return path.read_text(encoding="utf-8")


class InlineTextProvider:
    """Serve dataset text from an in-memory mapping, e.g. uploaded files."""

    def __init__(self, files: Mapping[str, str]) -> None:
        self.files = dict(files)

    def load_text(self, name: str) -> str:
        try:
            return self.files[name]
        except KeyError as exc:
            raise DatasetNotFoundError(f"Dataset file not found: {name}", stage="load") from exc


def default_provider() -> TextProvider:
    """Use ``PULSEWRAP_DATA_DIR`` when set, otherwise the packaged demo data."""

    data_dir = os.getenv("PULSEWRAP_DATA_DIR")
    if data_dir:
        return DirectoryTextProvider(data_dir)
    return PackagedTextProvider()


def dataset_files(variant: str) -> tuple[str, str]:
    """Return the ``(kpi, spend)`` file names for a demo variant.

    Variant ``"A"`` has its own files; every other identifier maps to ``"B"``.
    """

    suffix = "A" if variant == "A" else "B"
    return f"kpi_daily_{suffix}.json", f"category_spend_{suffix}.json"


def load_dataset(variant: str = DEFAULT_VARIANT, provider: TextProvider | None = None) -> Dataset:
    """Load and parse the KPI and spend files for ``variant``."""

    provider = provider or default_provider()
    kpi_name, spend_name = dataset_files(variant)
    try:
        kpi_text = provider.load_text(kpi_name)
        spend_text = provider.load_text(spend_name)
    except DatasetNotFoundError:
        logger.warning("Dataset variant %s could not be loaded", variant)
        raise
    logger.debug("Loaded dataset variant %s from %s", variant, type(provider).__name__)
    return parse_dataset(kpi_text, spend_text)
