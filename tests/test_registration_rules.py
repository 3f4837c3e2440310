"""
Validation rule tests.
Checks required-field messages, shape rules and the last-message-wins policy.
"""

import pytest

from student_registration.core import rules
from student_registration.core.rules import ValidationResult
from student_registration.core.rules.registration_rules import FIELD_RULES, YEAR_OPTIONS


REQUIRED_MESSAGES = {
    "firstName": "First name is required",
    "lastName": "Last name is required",
    "studentId": "Student ID is required",
    "course": "Course is required",
    "year": "Year is required",
    "section": "Section is required",
    "street": "Street address is required",
    "cityMunicipality": "City/Municipality is required",
    "province": "Province is required",
    "postalCode": "Postal code is required",
}


class TestValidationResult:
    """ValidationResult bookkeeping."""

    def test_starts_ok(self):
        r = ValidationResult()
        assert r.ok
        assert r.field_errors == {}

    def test_later_message_overwrites_same_field(self):
        r = ValidationResult()
        r.add_field_error("studentId", "first")
        r.add_field_error("studentId", "second")
        assert not r.ok
        assert r.field_errors == {"studentId": "second"}

    def test_empty_message_is_ignored(self):
        r = ValidationResult()
        r.add_field_error("firstName", "")
        assert r.ok


class TestRequiredFields:
    """Presence rules."""

    @pytest.mark.parametrize("field_name,message", sorted(REQUIRED_MESSAGES.items()))
    @pytest.mark.parametrize("blank", ["", "   ", "\t\n"])
    def test_blank_field_reports_required_message(self, valid_data, field_name, message, blank):
        valid_data[field_name] = blank
        result = rules.validate_registration(valid_data)
        assert result.field_errors == {field_name: message}

    def test_missing_profile_picture(self, valid_data):
        valid_data["profilePicture"] = None
        result = rules.validate_registration(valid_data)
        assert result.field_errors == {"profilePicture": "Profile picture is required"}

    def test_middle_name_is_optional(self, valid_data):
        valid_data["middleName"] = ""
        assert rules.validate_registration(valid_data).ok
        assert "middleName" not in FIELD_RULES

    def test_empty_form_reports_every_rule_field(self):
        result = rules.validate_registration({})
        assert set(result.field_errors) == set(REQUIRED_MESSAGES) | {"profilePicture"}
        assert "middleName" not in result.field_errors


class TestShapeRules:
    """Student ID length, postal code format and year options."""

    def test_valid_snapshot_has_no_errors(self, valid_data):
        result = rules.validate_registration(valid_data)
        assert result.ok
        assert result.field_errors == {}

    def test_short_student_id(self, valid_data):
        valid_data["studentId"] = "abc"
        result = rules.validate_registration(valid_data)
        assert result.field_errors == {"studentId": "Student ID must be at least 8 characters"}

    def test_student_id_length_counts_trimmed_text(self, valid_data):
        valid_data["studentId"] = "  1234567  "
        result = rules.validate_registration(valid_data)
        assert result.field_errors["studentId"] == "Student ID must be at least 8 characters"

    def test_student_id_exactly_eight(self, valid_data):
        valid_data["studentId"] = "12345678"
        assert rules.validate_registration(valid_data).ok

    @pytest.mark.parametrize(
        "postal_code,expected",
        [
            ("12a4", "Postal code must be 4 digits"),
            ("601", "Postal code must be 4 digits"),
            ("60145", "Postal code must be 4 digits"),
            (" 601", "Postal code must be 4 digits"),
            ("", "Postal code is required"),
            ("    ", "Postal code is required"),
            ("6014", None),
        ],
    )
    def test_postal_code(self, valid_data, postal_code, expected):
        valid_data["postalCode"] = postal_code
        result = rules.validate_registration(valid_data)
        assert result.field_errors.get("postalCode") == expected

    def test_postal_code_rejects_non_ascii_digits(self, valid_data):
        valid_data["postalCode"] = "١٢٣٤"
        result = rules.validate_registration(valid_data)
        assert result.field_errors["postalCode"] == "Postal code must be 4 digits"

    @pytest.mark.parametrize("year", YEAR_OPTIONS)
    def test_every_year_option_is_valid(self, valid_data, year):
        valid_data["year"] = year
        assert rules.validate_registration(valid_data).ok

    def test_unknown_year_is_rejected(self, valid_data):
        valid_data["year"] = "6th Year"
        result = rules.validate_registration(valid_data)
        assert result.field_errors == {"year": "Year is required"}

    def test_all_failures_reported_together(self, valid_data):
        valid_data.update(firstName="", studentId="abc", postalCode="12a4")
        result = rules.validate_registration(valid_data)
        assert result.field_errors == {
            "firstName": "First name is required",
            "studentId": "Student ID must be at least 8 characters",
            "postalCode": "Postal code must be 4 digits",
        }


class TestPurity:
    """validate_registration has no side effects."""

    def test_idempotent(self, valid_data):
        valid_data.update(lastName="", postalCode="abcd")
        first = rules.validate_registration(valid_data)
        second = rules.validate_registration(valid_data)
        assert first.field_errors == second.field_errors
        assert first.ok == second.ok

    def test_input_not_modified(self, valid_data):
        valid_data["firstName"] = "  Juan  "
        before = dict(valid_data)
        rules.validate_registration(valid_data)
        assert valid_data == before
