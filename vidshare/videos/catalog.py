"""Catalog of playable video sources.

New videos get their ``url`` and ``tag`` from a random catalog entry. The
catalog is a JSON list of ``{"Videourl": ..., "Category": ...}`` objects read
from ``VIDEO_CATALOG_PATH``; without it a small built-in list is used.
"""

import json
import random
from dataclasses import dataclass
from pathlib import Path

import structlog


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CatalogEntry:
    url: str
    category: str


_SAMPLE_BASE = "https://commondatastorage.googleapis.com/gtv-videos-bucket/sample"

BUILTIN_CATALOG: tuple[CatalogEntry, ...] = (
    CatalogEntry(f"{_SAMPLE_BASE}/BigBuckBunny.mp4", "Animation"),
    CatalogEntry(f"{_SAMPLE_BASE}/ElephantsDream.mp4", "Animation"),
    CatalogEntry(f"{_SAMPLE_BASE}/Sintel.mp4", "Animation"),
    CatalogEntry(f"{_SAMPLE_BASE}/TearsOfSteel.mp4", "Science"),
    CatalogEntry(f"{_SAMPLE_BASE}/ForBiggerBlazes.mp4", "Entertainment"),
    CatalogEntry(f"{_SAMPLE_BASE}/ForBiggerEscapes.mp4", "Entertainment"),
    CatalogEntry(f"{_SAMPLE_BASE}/ForBiggerFun.mp4", "Entertainment"),
    CatalogEntry(f"{_SAMPLE_BASE}/ForBiggerJoyrides.mp4", "Travel"),
    CatalogEntry(f"{_SAMPLE_BASE}/SubaruOutbackOnStreetAndDirt.mp4", "Travel"),
    CatalogEntry(f"{_SAMPLE_BASE}/WeAreGoingOnBullrun.mp4", "Sports"),
)


class VideoCatalog:
    """Non-empty list of catalog entries with random selection."""

    def __init__(self, entries: list[CatalogEntry] | tuple[CatalogEntry, ...]):
        if not entries:
            msg = "Video catalog is empty"
            raise ValueError(msg)
        self.entries = tuple(entries)

    def __len__(self) -> int:
        return len(self.entries)

    def choose(self, rng: random.Random) -> CatalogEntry:
        return self.entries[rng.randrange(len(self.entries))]

    @classmethod
    def load(cls, path: str | Path | None = None) -> "VideoCatalog":
        """Load the catalog file, or the built-in list when no path is given.

        Raises:
            ValueError: If the file has no usable entries
        """
        if path is None:
            return cls(BUILTIN_CATALOG)

        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        entries = [
            CatalogEntry(url=item["Videourl"], category=item["Category"])
            for item in raw
            if item.get("Videourl") and item.get("Category")
        ]
        logger.info("video_catalog_loaded", path=str(path), entries=len(entries))
        return cls(entries)
