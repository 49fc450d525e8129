"""Media descriptors for outfit avatars."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class MediaSlot(str, Enum):
    """Physical asset buckets the four outfit categories reduce to."""

    SUNNY = "sunny"
    RAINY = "rainy"
    COOL = "cool"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"

    @classmethod
    def parse(cls, raw: object) -> "Gender":
        """Anything other than an explicit female tag selects the male assets."""

        if isinstance(raw, cls):
            return raw
        return cls.FEMALE if str(raw).lower() == cls.FEMALE.value else cls.MALE


@dataclass(frozen=True)
class MediaDescriptor:
    """Displayable asset with an optional single image fallback."""

    kind: MediaKind
    url: str
    fallback: Optional["MediaDescriptor"] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", MediaKind(self.kind))
        if not self.url:
            raise ValueError("media url is required")
        if self.fallback is not None:
            if self.fallback.kind is not MediaKind.IMAGE:
                raise ValueError("fallback media must be an image")
            if self.fallback.fallback is not None:
                raise ValueError("fallback media cannot carry its own fallback")

    def to_dict(self) -> dict:
        payload = {"kind": self.kind.value, "url": self.url}
        if self.fallback is not None:
            payload["fallback"] = self.fallback.to_dict()
        return payload


class MediaLoadState(str, Enum):
    READY = "ready"
    FALLBACK = "fallback"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class MediaLoadResult:
    """Outcome of verifying a descriptor; ``descriptor`` is None when unavailable."""

    state: MediaLoadState
    requested: MediaDescriptor
    descriptor: Optional[MediaDescriptor] = None
    error: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.state is not MediaLoadState.UNAVAILABLE


__all__ = ["Gender", "MediaDescriptor", "MediaKind", "MediaLoadResult", "MediaLoadState", "MediaSlot"]
