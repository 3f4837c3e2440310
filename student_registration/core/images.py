from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Protocol
from uuid import uuid4


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ImageCandidate:
    """A file the user picked for the profile picture (not decoded)."""
    file_name: str
    media_type: str
    data: bytes = b""


class PreviewError(RuntimeError):
    pass


def is_image_media_type(media_type: object) -> bool:
    """Accepts any declared image type (image/png, image/jpeg, ...)."""
    if not media_type:
        return False
    return str(media_type).strip().lower().startswith("image/")


class PreviewProvider(Protocol):
    def create(self, candidate: ImageCandidate) -> str: ...

    def release(self, handle: str) -> None: ...

    def resolve(self, handle: str) -> ImageCandidate: ...


class PreviewRegistry:
    """
    Issues display handles for accepted pictures.

    Handles look like "preview://<hex>" and stay resolvable until released.
    Releasing an unknown or already released handle raises PreviewError.
    """

    SCHEME = "preview://"

    def __init__(self) -> None:
        self._live: Dict[str, ImageCandidate] = {}

    def create(self, candidate: ImageCandidate) -> str:
        handle = f"{self.SCHEME}{uuid4().hex}"
        self._live[handle] = candidate
        logger.debug("Preview created: %s (%s)", handle, candidate.file_name)
        return handle

    def release(self, handle: str) -> None:
        if handle not in self._live:
            raise PreviewError(f"Preview handle is not live: {handle}")
        del self._live[handle]
        logger.debug("Preview released: %s", handle)

    def resolve(self, handle: str) -> ImageCandidate:
        try:
            return self._live[handle]
        except KeyError:
            raise PreviewError(f"Preview handle is not live: {handle}") from None

    def is_live(self, handle: str) -> bool:
        return handle in self._live

    @property
    def live_count(self) -> int:
        return len(self._live)
