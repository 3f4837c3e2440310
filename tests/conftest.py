"""
Shared fixtures for the registration form tests.
"""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from student_registration.core.form_state import FormStateStore
from student_registration.core.images import ImageCandidate, PreviewRegistry


@pytest.fixture(scope="session")
def qapp():
    """One QApplication for all widget tests (offscreen platform)."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def valid_data():
    """A fully well-formed registration snapshot."""
    return {
        "profilePicture": ImageCandidate("me.png", "image/png", b"\x89PNG"),
        "firstName": "Juan",
        "middleName": "",
        "lastName": "Dela Cruz",
        "studentId": "20231234",
        "course": "BSIT",
        "year": "2nd Year",
        "section": "A",
        "street": "123 A. C. Cortes Ave",
        "cityMunicipality": "Mandaue City",
        "province": "Cebu",
        "postalCode": "6014",
    }


@pytest.fixture
def registry():
    return PreviewRegistry()


@pytest.fixture
def store(registry):
    s = FormStateStore(preview_provider=registry)
    yield s
    s.dispose()


@pytest.fixture
def filled_store(store, valid_data):
    """Store with every field correctly filled in."""
    for name, value in valid_data.items():
        if name == "profilePicture":
            store.set_profile_picture(value)
        else:
            store.set_field(name, value)
    return store
