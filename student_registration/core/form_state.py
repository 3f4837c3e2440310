from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from student_registration.core.canonical import truncate
from student_registration.core.images import (
    ImageCandidate,
    PreviewProvider,
    PreviewRegistry,
    is_image_media_type,
)
from student_registration.core.rules.registration_rules import (
    FIELD_NAMES,
    INPUT_MAX_LENGTH,
    INVALID_IMAGE_MESSAGE,
    PROFILE_PICTURE,
)


logger = logging.getLogger(__name__)

Listener = Callable[["FormStateStore"], None]


def empty_field_set() -> Dict[str, Any]:
    return {name: None if name == PROFILE_PICTURE else "" for name in FIELD_NAMES}


class FormStateStore:
    """
    Field values and interaction state for one form session.

    IMPORTANT:
    - Values change only through the set_* / replace_errors / reset methods.
    - Editing a field that has an error clears that error right away, without
      re-validating. The full check happens again on submit.
    - preview_reference is set iff profile_picture is set, and the previous
      handle is released before a new one is stored.
    """

    def __init__(self, preview_provider: Optional[PreviewProvider] = None) -> None:
        self._previews: PreviewProvider = preview_provider if preview_provider is not None else PreviewRegistry()
        self._values: Dict[str, Any] = empty_field_set()
        self._errors: Dict[str, str] = {}
        self._focused_field: Optional[str] = None
        self._preview_reference: Optional[str] = None
        self._listeners: List[Listener] = []
        logger.debug("Form state created")

    # ----------------------------
    # Read access
    # ----------------------------
    def value(self, name: str) -> Any:
        self._require_field(name)
        return self._values[name]

    def snapshot(self) -> Dict[str, Any]:
        return dict(self._values)

    @property
    def errors(self) -> Dict[str, str]:
        return dict(self._errors)

    def error_for(self, name: str) -> Optional[str]:
        return self._errors.get(name)

    @property
    def focused_field(self) -> Optional[str]:
        return self._focused_field

    @property
    def profile_picture(self) -> Optional[ImageCandidate]:
        return self._values[PROFILE_PICTURE]

    @property
    def preview_reference(self) -> Optional[str]:
        return self._preview_reference

    @property
    def preview_provider(self) -> PreviewProvider:
        return self._previews

    # ----------------------------
    # Updates
    # ----------------------------
    def set_field(self, name: str, value: object) -> None:
        self._require_field(name)
        if name == PROFILE_PICTURE:
            raise KeyError("profilePicture is set through set_profile_picture()")

        self._values[name] = truncate(value, INPUT_MAX_LENGTH.get(name))
        # Optimistic clear: the new value may still be invalid.
        self._errors.pop(name, None)
        self._notify()

    def set_profile_picture(self, candidate: Optional[ImageCandidate]) -> bool:
        """
        Returns True if the candidate was accepted.
        None (nothing chosen) leaves everything as is.
        """
        if candidate is None:
            return False

        if not is_image_media_type(candidate.media_type):
            logger.info("Rejected profile picture %r (%s)", candidate.file_name, candidate.media_type)
            self._errors[PROFILE_PICTURE] = INVALID_IMAGE_MESSAGE
            self._notify()
            return False

        new_reference = self._previews.create(candidate)
        self._release_preview()
        self._values[PROFILE_PICTURE] = candidate
        self._preview_reference = new_reference
        self._errors.pop(PROFILE_PICTURE, None)
        self._notify()
        return True

    def set_focus(self, name: Optional[str]) -> None:
        if name is not None:
            self._require_field(name)
        self._focused_field = name
        self._notify()

    def replace_errors(self, error_map: Mapping[str, str]) -> None:
        self._errors = {k: v for k, v in error_map.items() if v}
        self._notify()

    def reset(self) -> None:
        self._release_preview()
        self._values = empty_field_set()
        self._errors = {}
        self._focused_field = None
        self._notify()

    def dispose(self) -> None:
        """Teardown: releases the preview (once) and drops listeners."""
        self._release_preview()
        self._values = empty_field_set()
        self._errors = {}
        self._focused_field = None
        self._listeners.clear()
        logger.debug("Form state disposed")

    # ----------------------------
    # Change notification
    # ----------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ----------------------------
    # Helpers
    # ----------------------------
    def _release_preview(self) -> None:
        if self._preview_reference is None:
            return
        reference = self._preview_reference
        self._preview_reference = None
        self._values[PROFILE_PICTURE] = None
        self._previews.release(reference)

    @staticmethod
    def _require_field(name: str) -> None:
        if name not in FIELD_NAMES:
            raise KeyError(f"Unknown form field: {name!r}")
