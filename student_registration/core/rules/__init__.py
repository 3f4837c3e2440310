from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(slots=True)
class ValidationResult:
    """
    Project standard for rule outputs.

    - ok: Blocking status. If False, the caller must not submit.
    - field_errors: Field-specific blocking messages (English only).
      This is the form's error map: a field is valid iff it has no entry.
    """
    ok: bool = True
    field_errors: Dict[str, str] = field(default_factory=dict)

    def add_field_error(self, field_name: str, message: str) -> None:
        # Same key overwrites: a field only ever carries its last failing message.
        if field_name and message:
            self.field_errors[field_name] = message
            self.ok = False

    def failing_fields(self) -> List[str]:
        return list(self.field_errors)


# Re-export rule entry points
from .registration_rules import validate_registration
