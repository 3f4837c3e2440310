from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from student_registration.core import rules
from student_registration.core.form_state import FormStateStore
from student_registration.core.rules.registration_rules import PROFILE_PICTURE


logger = logging.getLogger(__name__)

# Receives the validated snapshot; returns True if the registration went through.
SubmissionSink = Callable[[Mapping[str, Any]], Optional[bool]]


class SubmissionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(slots=True)
class SubmissionOutcome:
    state: SubmissionState
    field_errors: Dict[str, str] = field(default_factory=dict)
    snapshot: Dict[str, Any] = field(default_factory=dict)
    sink_result: Optional[bool] = None

    @property
    def accepted(self) -> bool:
        return self.state is SubmissionState.ACCEPTED


class LoggingSubmissionSink:
    """Default sink: logs the submitted registration and reports success."""

    def __call__(self, snapshot: Mapping[str, Any]) -> bool:
        data = dict(snapshot)
        picture = data.get(PROFILE_PICTURE)
        if picture is not None:
            data[PROFILE_PICTURE] = getattr(picture, "file_name", str(picture))
        logger.info("Form submitted: %s", data)
        return True


class SubmissionFlow:
    """
    Submit handling:
      Idle -> Validating -> Accepted | Rejected -> Idle

    - The whole snapshot is validated and the store's errors are replaced.
    - The sink is called once, and only when there are no errors.
    - The sink's outcome is passed back as-is (no retries).
    """

    def __init__(
        self,
        store: FormStateStore,
        sink: Optional[SubmissionSink] = None,
        *,
        reset_after_submit: bool = False,
    ) -> None:
        self._store = store
        self._sink: SubmissionSink = sink if sink is not None else LoggingSubmissionSink()
        self._reset_after_submit = reset_after_submit
        self.state = SubmissionState.IDLE

    def submit(self) -> SubmissionOutcome:
        if self.state is not SubmissionState.IDLE:
            raise RuntimeError(f"Submission already in progress: {self.state.value}")

        self.state = SubmissionState.VALIDATING
        try:
            snapshot = self._store.snapshot()
            result = rules.validate_registration(snapshot)
            self._store.replace_errors(result.field_errors)

            if not result.ok:
                self.state = SubmissionState.REJECTED
                logger.info("Registration rejected; failing fields: %s", ", ".join(result.failing_fields()))
                return SubmissionOutcome(self.state, dict(result.field_errors), snapshot)

            self.state = SubmissionState.ACCEPTED
            logger.info("Registration accepted for student %s", snapshot.get("studentId"))
            sink_result = self._sink(snapshot)
            if self._reset_after_submit and sink_result is not False:
                self._store.reset()
            return SubmissionOutcome(self.state, {}, snapshot, sink_result)
        finally:
            self.state = SubmissionState.IDLE
