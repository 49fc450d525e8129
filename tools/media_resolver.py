"""Outfit avatar media selection, verification and fallback."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent.futures import Executor, ThreadPoolExecutor, wait
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Dict, Optional

import requests

from memory.media_cache import MediaCache
from models.media import Gender, MediaDescriptor, MediaKind, MediaLoadResult, MediaLoadState, MediaSlot
from models.outfit import OutfitCategory
from outfit_app.config import AppConfig
from outfit_app.errors import MediaLoadError

LOGGER = logging.getLogger(__name__)

DEFAULT_PRELOAD_TIMEOUT_SECONDS = 5.0
# CDNs often serve video and image bytes without a specific media type.
GENERIC_CONTENT_TYPES = frozenset({"application/octet-stream", "binary/octet-stream"})

CATEGORY_SLOTS: Dict[OutfitCategory, MediaSlot] = {
    OutfitCategory.SUNNY_SHORTS_SHORT_SLEEVE: MediaSlot.SUNNY,
    OutfitCategory.SUNNY_SHORTS_LONG_SLEEVE: MediaSlot.COOL,
    OutfitCategory.RAINY_LONG_PANTS_LONG_SLEEVE: MediaSlot.RAINY,
    OutfitCategory.RAINY_SHORTS_LONG_SLEEVE_BOOTS: MediaSlot.RAINY,
}

MediaLibrary = Dict[Gender, Dict[MediaSlot, MediaDescriptor]]


def build_media_library(base_url: str = "") -> MediaLibrary:
    """Asset table; only the male rainy slot has a video with an image fallback."""

    root = base_url.rstrip("/")

    def image(name: str) -> MediaDescriptor:
        return MediaDescriptor(kind=MediaKind.IMAGE, url=f"{root}/images/{name}")

    return {
        Gender.MALE: {
            MediaSlot.SUNNY: image("sunny.png"),
            MediaSlot.RAINY: MediaDescriptor(
                kind=MediaKind.VIDEO,
                url=f"{root}/videos/rainy.mp4",
                fallback=image("rainy.png"),
            ),
            MediaSlot.COOL: image("cool.png"),
        },
        Gender.FEMALE: {
            MediaSlot.SUNNY: image("sunny2.png"),
            MediaSlot.RAINY: image("rainy2.png"),
            MediaSlot.COOL: image("cool2.png"),
        },
    }


def parse_category(category: object) -> Optional[OutfitCategory]:
    """Accept an enum member, its value or its name; unknown input yields None."""

    if isinstance(category, OutfitCategory):
        return category
    raw = str(category or "")
    try:
        return OutfitCategory(raw.lower())
    except ValueError:
        return OutfitCategory.__members__.get(raw.upper())


def category_slot(category: object) -> MediaSlot:
    parsed = parse_category(category)
    if parsed is None:
        return MediaSlot.SUNNY
    return CATEGORY_SLOTS[parsed]


class MediaLoader(ABC):
    """Verifies that an asset can actually be loaded."""

    @abstractmethod
    def verify(self, descriptor: MediaDescriptor, timeout_seconds: float) -> None:
        """Raise ``MediaLoadError`` when the asset cannot be loaded."""


class HttpMediaLoader(MediaLoader):
    """Checks assets with a HEAD request, resolving relative URLs against ``base_url``."""

    def __init__(self, base_url: str = "") -> None:
        self.base_url = base_url.rstrip("/")

    def _absolute(self, url: str) -> str:
        if url.startswith(("http://", "https://")):
            return url
        return f"{self.base_url}/{url.lstrip('/')}"

    def verify(self, descriptor: MediaDescriptor, timeout_seconds: float) -> None:
        url = self._absolute(descriptor.url)
        try:
            response = requests.head(url, timeout=timeout_seconds, allow_redirects=True)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise MediaLoadError(f"media request failed: {exc.__class__.__name__}", url=descriptor.url) from exc
        content_type = response.headers.get("Content-Type", "").split(";")[0].strip().lower()
        if content_type and content_type not in GENERIC_CONTENT_TYPES and not content_type.startswith(
            f"{descriptor.kind.value}/"
        ):
            raise MediaLoadError(f"unexpected content type {content_type}", url=descriptor.url)


class FileMediaLoader(MediaLoader):
    """Checks assets exist under a static directory (the site's public root)."""

    def __init__(self, static_dir: str | Path, base_url: str = "") -> None:
        self.static_dir = Path(static_dir)
        self.base_url = base_url.rstrip("/")

    def _path(self, url: str) -> Path:
        relative = url[len(self.base_url):] if self.base_url and url.startswith(self.base_url) else url
        return self.static_dir / relative.lstrip("/")

    def verify(self, descriptor: MediaDescriptor, timeout_seconds: float) -> None:
        path = self._path(descriptor.url)
        if not path.is_file() or path.stat().st_size == 0:
            raise MediaLoadError("media file missing or empty", url=descriptor.url)


class MediaResolver:
    """Maps an outfit category and gender onto a displayable asset."""

    def __init__(
        self,
        library: MediaLibrary | None = None,
        cache: MediaCache[MediaDescriptor] | None = None,
        loader: MediaLoader | None = None,
        load_timeout_seconds: float = DEFAULT_PRELOAD_TIMEOUT_SECONDS,
    ) -> None:
        self.library = library or build_media_library()
        self.cache = cache if cache is not None else MediaCache()
        self.loader = loader or HttpMediaLoader()
        self.load_timeout_seconds = load_timeout_seconds

    @classmethod
    def from_config(cls, config: AppConfig) -> "MediaResolver":
        if config.media_static_dir:
            loader: MediaLoader = FileMediaLoader(config.media_static_dir, base_url=config.media_base_url)
        else:
            loader = HttpMediaLoader(base_url=config.media_base_url)
        return cls(
            library=build_media_library(config.media_base_url),
            loader=loader,
            load_timeout_seconds=config.media_preload_timeout_seconds,
        )

    def resolve(self, category: object, gender: object = Gender.MALE) -> MediaDescriptor:
        """Return the descriptor for a category; unknown categories use the sunny slot."""

        parsed_gender = Gender.parse(gender)
        parsed = parse_category(category)
        key = (parsed.value if parsed else str(category), parsed_gender.value)
        return self.cache.get_or_resolve(key, lambda: self.library[parsed_gender][category_slot(category)])

    def media_kind(self, category: object, gender: object = Gender.MALE) -> MediaKind:
        return self.resolve(category, gender).kind

    def _verify(self, descriptor: MediaDescriptor, timeout: float, pool: Executor | None = None) -> None:
        if pool is None:
            self.loader.verify(descriptor, timeout)
            return
        future = pool.submit(self.loader.verify, descriptor, timeout)
        try:
            future.result(timeout=timeout)
        except FutureTimeoutError as exc:
            raise MediaLoadError("load timed out", url=descriptor.url) from exc

    def load_descriptor(
        self, descriptor: MediaDescriptor, timeout_seconds: float | None = None, pool: Executor | None = None
    ) -> MediaLoadResult:
        """Verify the primary asset, then its fallback; never retries.

        With ``pool`` each verification runs there and is abandoned after the
        timeout, which counts as a load failure.
        """

        timeout = self.load_timeout_seconds if timeout_seconds is None else timeout_seconds
        try:
            self._verify(descriptor, timeout, pool)
            return MediaLoadResult(state=MediaLoadState.READY, requested=descriptor, descriptor=descriptor)
        except MediaLoadError as exc:
            primary_error = str(exc)
            LOGGER.warning("Primary media failed to load", extra={"url": descriptor.url, "reason": primary_error})

        if descriptor.fallback is None:
            return MediaLoadResult(state=MediaLoadState.UNAVAILABLE, requested=descriptor, error=primary_error)

        try:
            self._verify(descriptor.fallback, timeout, pool)
        except MediaLoadError as exc:
            LOGGER.warning("Fallback media failed to load", extra={"url": descriptor.fallback.url, "reason": str(exc)})
            return MediaLoadResult(state=MediaLoadState.UNAVAILABLE, requested=descriptor, error=str(exc))
        return MediaLoadResult(
            state=MediaLoadState.FALLBACK,
            requested=descriptor,
            descriptor=descriptor.fallback,
            error=primary_error,
        )

    def load(self, category: object, gender: object = Gender.MALE) -> MediaLoadResult:
        return self.load_descriptor(self.resolve(category, gender))

    def preload_all(
        self, gender: object = Gender.MALE, timeout_seconds: float | None = None
    ) -> Dict[OutfitCategory, MediaLoadResult]:
        """Verify every category's asset concurrently.

        The timeout bounds each verification separately: a primary asset still
        loading when it expires falls back like any other failed load, and a
        slow asset never holds up the others.
        """

        timeout = self.load_timeout_seconds if timeout_seconds is None else timeout_seconds
        descriptors = {category: self.resolve(category, gender) for category in OutfitCategory}
        executor = ThreadPoolExecutor(max_workers=len(descriptors))
        # Primary and fallback checks for every slot may be outstanding at once.
        verify_pool = ThreadPoolExecutor(max_workers=2 * len(descriptors))
        try:
            futures = {
                category: executor.submit(self.load_descriptor, descriptor, timeout, verify_pool)
                for category, descriptor in descriptors.items()
            }
            wait(futures.values())
            results: Dict[OutfitCategory, MediaLoadResult] = {}
            for category, future in futures.items():
                if future.exception() is None:
                    results[category] = future.result()
                    continue
                LOGGER.error(
                    "Media preload raised", extra={"category": category.value, "reason": str(future.exception())}
                )
                results[category] = MediaLoadResult(
                    state=MediaLoadState.UNAVAILABLE,
                    requested=descriptors[category],
                    error=str(future.exception()),
                )
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
            verify_pool.shutdown(wait=False, cancel_futures=True)
        return results


__all__ = [
    "CATEGORY_SLOTS",
    "FileMediaLoader",
    "HttpMediaLoader",
    "MediaLoader",
    "MediaResolver",
    "build_media_library",
    "category_slot",
    "parse_category",
]
