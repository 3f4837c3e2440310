from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Tuple

from . import ValidationResult
from student_registration.core.canonical import canonical_text, is_blank, is_postal_code_format_ok


PROFILE_PICTURE = "profilePicture"

# FieldSet, in form order
FIELD_NAMES = [
    PROFILE_PICTURE,
    "firstName",
    "middleName",
    "lastName",
    "studentId",
    "course",
    "year",
    "section",
    "street",
    "cityMunicipality",
    "province",
    "postalCode",
]

TEXT_FIELDS = [name for name in FIELD_NAMES if name != PROFILE_PICTURE]

FIELD_LABELS = {
    PROFILE_PICTURE: "Profile Picture",
    "firstName": "First Name",
    "middleName": "Middle Name",
    "lastName": "Last Name",
    "studentId": "Student ID Number",
    "course": "Course",
    "year": "Year",
    "section": "Section",
    "street": "Street Address",
    "cityMunicipality": "City/Municipality",
    "province": "Province",
    "postalCode": "Postal Code",
}

YEAR_OPTIONS = ["1st Year", "2nd Year", "3rd Year", "4th Year", "5th Year"]

# Input caps applied while typing (not validation)
INPUT_MAX_LENGTH = {
    "postalCode": 4,
}

STUDENT_ID_MIN_LENGTH = 8

INVALID_IMAGE_MESSAGE = "Please select a valid image file"

Predicate = Callable[[Any], bool]

# Ordered (predicate, message) pairs per field. Every rule is evaluated and the
# last failing message wins. Shape rules pass on blank values so that a blank
# field only reports its presence message.
FIELD_RULES: Dict[str, List[Tuple[Predicate, str]]] = {
    PROFILE_PICTURE: [
        (lambda v: v is not None, "Profile picture is required"),
    ],
    "firstName": [
        (lambda v: not is_blank(v), "First name is required"),
    ],
    "lastName": [
        (lambda v: not is_blank(v), "Last name is required"),
    ],
    "studentId": [
        (lambda v: not is_blank(v), "Student ID is required"),
        (
            lambda v: is_blank(v) or len(canonical_text(v)) >= STUDENT_ID_MIN_LENGTH,
            f"Student ID must be at least {STUDENT_ID_MIN_LENGTH} characters",
        ),
    ],
    "course": [
        (lambda v: not is_blank(v), "Course is required"),
    ],
    "year": [
        (lambda v: not is_blank(v), "Year is required"),
        # "" is the unselected sentinel; anything else must be a listed option
        (lambda v: is_blank(v) or v in YEAR_OPTIONS, "Year is required"),
    ],
    "section": [
        (lambda v: not is_blank(v), "Section is required"),
    ],
    "street": [
        (lambda v: not is_blank(v), "Street address is required"),
    ],
    "cityMunicipality": [
        (lambda v: not is_blank(v), "City/Municipality is required"),
    ],
    "province": [
        (lambda v: not is_blank(v), "Province is required"),
    ],
    "postalCode": [
        (lambda v: not is_blank(v), "Postal code is required"),
        (lambda v: is_blank(v) or is_postal_code_format_ok(v), "Postal code must be 4 digits"),
    ],
}


def validate_registration(data: Mapping[str, Any]) -> ValidationResult:
    """
    Registration form validation:
    - Required fields must not be empty after trimming.
    - middleName is optional (not validated here).
    - studentId must be at least 8 characters (trimmed).
    - postalCode must be exactly 4 digits.
    - year must be one of YEAR_OPTIONS.
    - Missing keys are treated as empty; data is never modified.
    - Messages are English only.
    """
    r = ValidationResult()

    for field_name, field_rules in FIELD_RULES.items():
        default = None if field_name == PROFILE_PICTURE else ""
        value = data.get(field_name, default)
        for predicate, message in field_rules:
            if not predicate(value):
                r.add_field_error(field_name, message)

    return r
