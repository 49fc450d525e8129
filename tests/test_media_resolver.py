"""Avatar media resolution, load fallback state machine and preload isolation."""

import threading

import pytest

from memory.media_cache import MediaCache
from models.media import Gender, MediaDescriptor, MediaKind, MediaLoadState, MediaSlot
from models.outfit import OutfitCategory
from outfit_app.config import AppConfig
from outfit_app.errors import MediaLoadError
from tools.media_resolver import (
    FileMediaLoader,
    HttpMediaLoader,
    MediaLoader,
    MediaResolver,
    build_media_library,
    category_slot,
)


class RecordingLoader(MediaLoader):
    def __init__(self, failing: set | None = None, blocked: dict | None = None) -> None:
        self.failing = failing or set()
        self.blocked = blocked or {}
        self.verified: list = []

    def verify(self, descriptor: MediaDescriptor, timeout_seconds: float) -> None:
        self.verified.append(descriptor.url)
        gate = self.blocked.get(descriptor.url)
        if gate is not None:
            gate.wait(5)
        if descriptor.url in self.failing:
            raise MediaLoadError("cannot decode", url=descriptor.url)


def test_category_to_slot_mapping() -> None:
    assert category_slot(OutfitCategory.SUNNY_SHORTS_SHORT_SLEEVE) is MediaSlot.SUNNY
    assert category_slot(OutfitCategory.SUNNY_SHORTS_LONG_SLEEVE) is MediaSlot.COOL
    assert category_slot(OutfitCategory.RAINY_LONG_PANTS_LONG_SLEEVE) is MediaSlot.RAINY
    assert category_slot("RAINY_SHORTS_LONG_SLEEVE_BOOTS") is MediaSlot.RAINY
    assert category_slot("hurricane") is MediaSlot.SUNNY


def test_male_rainy_is_video_with_image_fallback() -> None:
    resolver = MediaResolver(loader=RecordingLoader())

    descriptor = resolver.resolve(OutfitCategory.RAINY_LONG_PANTS_LONG_SLEEVE, "male")

    assert descriptor.kind is MediaKind.VIDEO
    assert descriptor.url == "/videos/rainy.mp4"
    assert descriptor.fallback == MediaDescriptor(kind=MediaKind.IMAGE, url="/images/rainy.png")
    assert resolver.media_kind(OutfitCategory.RAINY_SHORTS_LONG_SLEEVE_BOOTS) is MediaKind.VIDEO


def test_female_assets_are_images_without_fallback() -> None:
    resolver = MediaResolver(library=build_media_library("https://cdn.example.tw/"), loader=RecordingLoader())

    descriptor = resolver.resolve("rainy_long_pants_long_sleeve", "FEMALE")

    assert descriptor == MediaDescriptor(kind=MediaKind.IMAGE, url="https://cdn.example.tw/images/rainy2.png")
    assert resolver.resolve(OutfitCategory.SUNNY_SHORTS_LONG_SLEEVE, Gender.FEMALE).url.endswith("cool2.png")


def test_unknown_category_and_gender_fall_back_to_male_sunny() -> None:
    resolver = MediaResolver(loader=RecordingLoader())

    assert resolver.resolve("tornado", "unspecified").url == "/images/sunny.png"


def test_resolution_is_idempotent_and_cached() -> None:
    cache: MediaCache[MediaDescriptor] = MediaCache()
    resolver = MediaResolver(cache=cache, loader=RecordingLoader())

    first = resolver.resolve(OutfitCategory.SUNNY_SHORTS_SHORT_SLEEVE, "female")
    second = resolver.resolve("sunny_shorts_short_sleeve", Gender.FEMALE)

    assert (first.url, first.kind) == (second.url, second.kind)
    assert (cache.hits, cache.misses) == (1, 1)
    assert len(cache) == 1


def test_fallback_depth_never_exceeds_one() -> None:
    library = build_media_library()
    for slots in library.values():
        for descriptor in slots.values():
            if descriptor.fallback is not None:
                assert descriptor.fallback.fallback is None
                assert descriptor.fallback.kind is MediaKind.IMAGE

    image = MediaDescriptor(kind=MediaKind.IMAGE, url="/a.png")
    with pytest.raises(ValueError):
        MediaDescriptor(kind=MediaKind.IMAGE, url="/b.png", fallback=MediaDescriptor("image", "/c.png", fallback=image))
    with pytest.raises(ValueError):
        MediaDescriptor(kind=MediaKind.IMAGE, url="/b.png", fallback=MediaDescriptor("video", "/c.mp4"))
    with pytest.raises(ValueError):
        MediaDescriptor(kind=MediaKind.IMAGE, url="")


def test_load_ready_when_primary_verifies() -> None:
    loader = RecordingLoader()
    resolver = MediaResolver(loader=loader)

    result = resolver.load(OutfitCategory.RAINY_LONG_PANTS_LONG_SLEEVE)

    assert result.state is MediaLoadState.READY
    assert result.descriptor.url == "/videos/rainy.mp4"
    assert loader.verified == ["/videos/rainy.mp4"]


def test_load_uses_fallback_when_video_fails() -> None:
    loader = RecordingLoader(failing={"/videos/rainy.mp4"})
    resolver = MediaResolver(loader=loader)

    result = resolver.load(OutfitCategory.RAINY_SHORTS_LONG_SLEEVE_BOOTS)

    assert result.state is MediaLoadState.FALLBACK
    assert result.descriptor.url == "/images/rainy.png"
    assert result.requested.url == "/videos/rainy.mp4"
    assert result.available
    assert loader.verified == ["/videos/rainy.mp4", "/images/rainy.png"]


def test_load_unavailable_when_fallback_fails_too() -> None:
    loader = RecordingLoader(failing={"/videos/rainy.mp4", "/images/rainy.png"})

    result = MediaResolver(loader=loader).load(OutfitCategory.RAINY_LONG_PANTS_LONG_SLEEVE)

    assert result.state is MediaLoadState.UNAVAILABLE
    assert result.descriptor is None
    assert not result.available
    assert loader.verified == ["/videos/rainy.mp4", "/images/rainy.png"]


def test_load_unavailable_without_retry_when_no_fallback() -> None:
    loader = RecordingLoader(failing={"/images/cool.png"})

    result = MediaResolver(loader=loader).load(OutfitCategory.SUNNY_SHORTS_LONG_SLEEVE)

    assert result.state is MediaLoadState.UNAVAILABLE
    assert loader.verified == ["/images/cool.png"]


def test_preload_timeout_falls_back_for_the_slow_asset_only() -> None:
    gate = threading.Event()
    loader = RecordingLoader(blocked={"/videos/rainy.mp4": gate})
    resolver = MediaResolver(loader=loader)

    try:
        results = resolver.preload_all("male", timeout_seconds=0.2)
    finally:
        gate.set()

    assert set(results) == set(OutfitCategory)
    rainy = results[OutfitCategory.RAINY_LONG_PANTS_LONG_SLEEVE]
    assert rainy.state is MediaLoadState.FALLBACK
    assert rainy.descriptor.url == "/images/rainy.png"
    assert rainy.error == "load timed out"
    assert results[OutfitCategory.RAINY_SHORTS_LONG_SLEEVE_BOOTS].state is MediaLoadState.FALLBACK
    assert results[OutfitCategory.SUNNY_SHORTS_SHORT_SLEEVE].state is MediaLoadState.READY
    assert results[OutfitCategory.SUNNY_SHORTS_LONG_SLEEVE].state is MediaLoadState.READY


def test_preload_unavailable_when_fallback_also_times_out() -> None:
    gate = threading.Event()
    loader = RecordingLoader(blocked={"/videos/rainy.mp4": gate, "/images/rainy.png": gate})

    try:
        results = MediaResolver(loader=loader).preload_all("male", timeout_seconds=0.2)
    finally:
        gate.set()

    rainy = results[OutfitCategory.RAINY_LONG_PANTS_LONG_SLEEVE]
    assert rainy.state is MediaLoadState.UNAVAILABLE
    assert rainy.descriptor is None
    assert rainy.error == "load timed out"
    assert results[OutfitCategory.SUNNY_SHORTS_SHORT_SLEEVE].state is MediaLoadState.READY


def test_preload_reports_loader_crash_as_unavailable() -> None:
    class CrashingLoader(MediaLoader):
        def verify(self, descriptor: MediaDescriptor, timeout_seconds: float) -> None:
            if descriptor.url.endswith("sunny2.png"):
                raise OSError("disk gone")

    results = MediaResolver(loader=CrashingLoader()).preload_all("female", timeout_seconds=1.0)

    assert results[OutfitCategory.SUNNY_SHORTS_SHORT_SLEEVE].state is MediaLoadState.UNAVAILABLE
    assert results[OutfitCategory.SUNNY_SHORTS_SHORT_SLEEVE].error == "disk gone"
    assert results[OutfitCategory.SUNNY_SHORTS_LONG_SLEEVE].state is MediaLoadState.READY


def test_http_loader_checks_status_and_content_type(http_stub) -> None:
    http_stub.media("/videos/rainy.mp4", "video/mp4")
    http_stub.media("/images/rainy.png", "text/html")
    http_stub.media("/images/cool.png", "image/png", status_code=404)
    loader = HttpMediaLoader(base_url="https://cdn.example.tw")

    loader.verify(MediaDescriptor(kind=MediaKind.VIDEO, url="/videos/rainy.mp4"), 1.0)
    with pytest.raises(MediaLoadError):
        loader.verify(MediaDescriptor(kind=MediaKind.IMAGE, url="/images/rainy.png"), 1.0)
    with pytest.raises(MediaLoadError):
        loader.verify(MediaDescriptor(kind=MediaKind.IMAGE, url="/images/cool.png"), 1.0)
    assert http_stub.urls()[0] == "https://cdn.example.tw/videos/rainy.mp4"


def test_file_loader_checks_static_directory(tmp_path) -> None:
    (tmp_path / "images").mkdir()
    (tmp_path / "images" / "sunny.png").write_bytes(b"\x89PNG")
    (tmp_path / "images" / "cool.png").write_bytes(b"")
    resolver = MediaResolver.from_config(AppConfig(media_static_dir=str(tmp_path)))

    assert isinstance(resolver.loader, FileMediaLoader)
    assert resolver.load(OutfitCategory.SUNNY_SHORTS_SHORT_SLEEVE).state is MediaLoadState.READY
    assert resolver.load(OutfitCategory.SUNNY_SHORTS_LONG_SLEEVE).state is MediaLoadState.UNAVAILABLE
    assert resolver.load(OutfitCategory.RAINY_LONG_PANTS_LONG_SLEEVE).state is MediaLoadState.UNAVAILABLE


def test_media_cache_get_or_resolve_runs_resolver_once() -> None:
    cache: MediaCache[str] = MediaCache()
    calls = []

    def resolver() -> str:
        calls.append(1)
        return "value"

    assert cache.get_or_resolve("key", resolver) == "value"
    assert cache.get_or_resolve("key", resolver) == "value"
    assert calls == [1]
    assert "key" in cache
    assert cache.get("missing") is None
    cache.set("other", "x")
    assert len(cache) == 2
    cache.clear()
    assert len(cache) == 0


def test_http_loader_accepts_generic_binary_content_type(http_stub) -> None:
    http_stub.media("/videos/rainy.mp4", "application/octet-stream")
    http_stub.media("/images/sunny.png", "image/png; charset=binary")
    loader = HttpMediaLoader(base_url="https://cdn.example.tw")

    loader.verify(MediaDescriptor(kind=MediaKind.VIDEO, url="/videos/rainy.mp4"), 1.0)
    loader.verify(MediaDescriptor(kind=MediaKind.IMAGE, url="/images/sunny.png"), 1.0)
    assert len(http_stub.urls()) == 2
