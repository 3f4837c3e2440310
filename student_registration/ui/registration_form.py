from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from PySide6.QtCore import QEvent, QMimeDatabase, QObject, Qt, Signal
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QFormLayout,
    QGroupBox,
    QLineEdit,
    QComboBox,
    QLabel,
    QPushButton,
    QMessageBox,
    QFileDialog,
    QFrame,
    QSizePolicy,
)

from student_registration.core.form_state import FormStateStore
from student_registration.core.images import ImageCandidate
from student_registration.core.rules.registration_rules import (
    FIELD_LABELS,
    INPUT_MAX_LENGTH,
    PROFILE_PICTURE,
    YEAR_OPTIONS,
)
from student_registration.core.settings import Settings
from student_registration.core.submission import SubmissionFlow, SubmissionOutcome, SubmissionSink


logger = logging.getLogger(__name__)

FieldWidget = Union[QLineEdit, QComboBox]

_PLACEHOLDERS: Dict[str, str] = {
    "firstName": "Enter first name",
    "middleName": "Enter middle name",
    "lastName": "Enter last name",
    "studentId": "Enter student ID",
    "course": "Enter course",
    "section": "Enter section",
    "street": "Enter street address",
    "cityMunicipality": "Enter city/municipality",
    "province": "Enter province",
    "postalCode": "Enter postal code",
}

_REQUIRED_MARK_EXEMPT = {"middleName"}

_IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.gif *.bmp *.webp);;All Files (*)"

_STYLE_SHEET = """
QLineEdit[state="error"], QComboBox[state="error"] { border: 2px solid #dc2626; }
QLineEdit[state="focused"], QComboBox[state="focused"] { border: 2px solid #3b82f6; }
QLabel[role="error"] { color: #dc2626; }
"""


def load_image_candidate(path: Union[str, Path]) -> ImageCandidate:
    """Reads a picked file; the media type is detected from name and content."""
    p = Path(path)
    media_type = QMimeDatabase().mimeTypeForFile(str(p)).name()
    return ImageCandidate(file_name=p.name, media_type=media_type, data=p.read_bytes())


class _FocusTracker(QObject):
    """Forwards focus in/out of one input to the form state."""

    def __init__(self, field_name: str, on_focus: Callable[[Optional[str]], None], parent: QObject) -> None:
        super().__init__(parent)
        self._field_name = field_name
        self._on_focus = on_focus

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if event.type() == QEvent.Type.FocusIn:
            self._on_focus(self._field_name)
        elif event.type() == QEvent.Type.FocusOut:
            self._on_focus(None)
        return False


class RegistrationForm(QWidget):
    """
    Student registration form UI:
    - Profile Picture (image file, with preview)
    - Personal Information: First / Middle / Last Name
    - Academic Information: Student ID, Course, Year, Section
    - Address Information: Street, City/Municipality, Province, Postal Code

    The widget only renders FormStateStore and forwards user input to it.
    """

    registration_submitted = Signal(dict)  # accepted snapshot

    def __init__(
        self,
        store: Optional[FormStateStore] = None,
        sink: Optional[SubmissionSink] = None,
        settings: Optional[Settings] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)

        self._settings = settings or Settings()
        self.store = store if store is not None else FormStateStore()
        self.flow = SubmissionFlow(
            self.store,
            sink,
            reset_after_submit=self._settings.reset_after_submit,
        )

        self.inputs: Dict[str, FieldWidget] = {}
        self.error_labels: Dict[str, QLabel] = {}
        self._shown_preview: Optional[str] = None

        self.setStyleSheet(_STYLE_SHEET)
        self._build_ui()
        self._unsubscribe = self.store.subscribe(self._render)
        self._render(self.store)

    # ------------------------------------------------------------------
    # UI
    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(16, 16, 16, 16)
        root.setSpacing(16)

        title = QLabel("Student Registration")
        title_font = title.font()
        title_font.setBold(True)
        title_font.setPointSize(title_font.pointSize() + 4)
        title.setFont(title_font)
        title.setAlignment(Qt.AlignCenter)

        subtitle = QLabel("Please fill in all required information")
        subtitle.setAlignment(Qt.AlignCenter)

        root.addWidget(title)
        root.addWidget(subtitle)
        root.addWidget(self._build_photo_group())
        root.addWidget(self._build_group("Personal Information", ["firstName", "middleName", "lastName"]))
        root.addWidget(self._build_group("Academic Information", ["studentId", "course", "year", "section"]))
        root.addWidget(
            self._build_group("Address Information", ["street", "cityMunicipality", "province", "postalCode"])
        )

        divider = QFrame()
        divider.setFrameShape(QFrame.HLine)
        divider.setFrameShadow(QFrame.Sunken)
        root.addWidget(divider)

        self.btn_submit = QPushButton("Submit Registration")
        self.btn_submit.clicked.connect(self._on_submit_clicked)
        root.addWidget(self.btn_submit)
        root.addStretch(1)

    def _group_box(self, title: str) -> QGroupBox:
        box = QGroupBox(title)
        box.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Maximum)
        return box

    def _error_label(self, field_name: str) -> QLabel:
        label = QLabel("")
        label.setProperty("role", "error")
        label.setWordWrap(True)
        label.hide()
        self.error_labels[field_name] = label
        return label

    def _build_photo_group(self) -> QGroupBox:
        box = self._group_box(FIELD_LABELS[PROFILE_PICTURE])
        layout = QVBoxLayout(box)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        size = self._settings.preview_size
        self.preview_label = QLabel("No photo")
        self.preview_label.setFixedSize(size, size)
        self.preview_label.setAlignment(Qt.AlignCenter)
        self.preview_label.setFrameShape(QFrame.Box)

        self.btn_choose_photo = QPushButton("Choose Photo")
        self.btn_choose_photo.clicked.connect(self._on_choose_photo_clicked)

        layout.addWidget(self.preview_label, 0, Qt.AlignHCenter)
        layout.addWidget(self.btn_choose_photo, 0, Qt.AlignHCenter)
        layout.addWidget(self._error_label(PROFILE_PICTURE), 0, Qt.AlignHCenter)
        return box

    def _build_group(self, title: str, field_names: list[str]) -> QGroupBox:
        box = self._group_box(title)
        form = QFormLayout(box)
        form.setContentsMargins(12, 12, 12, 12)
        form.setHorizontalSpacing(12)
        form.setVerticalSpacing(8)
        form.setLabelAlignment(Qt.AlignLeft)

        for name in field_names:
            widget = self._build_input(name)
            self.inputs[name] = widget
            widget.installEventFilter(_FocusTracker(name, self.store.set_focus, widget))

            cell = QWidget()
            v = QVBoxLayout(cell)
            v.setContentsMargins(0, 0, 0, 0)
            v.setSpacing(2)
            v.addWidget(widget)
            if name not in _REQUIRED_MARK_EXEMPT:
                v.addWidget(self._error_label(name))

            label = FIELD_LABELS[name]
            if name not in _REQUIRED_MARK_EXEMPT:
                label += " *"
            form.addRow(label, cell)

        return box

    def _build_input(self, name: str) -> FieldWidget:
        if name == "year":
            cmb = QComboBox()
            cmb.addItem("Select Year", "")
            for option in YEAR_OPTIONS:
                cmb.addItem(option, option)
            cmb.currentIndexChanged.connect(self._on_year_changed)
            return cmb

        le = QLineEdit()
        le.setPlaceholderText(_PLACEHOLDERS.get(name, ""))
        max_length = INPUT_MAX_LENGTH.get(name)
        if max_length is not None:
            le.setMaxLength(max_length)
        le.textEdited.connect(lambda text, n=name: self.store.set_field(n, text))
        return le

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def _on_year_changed(self, index: int) -> None:
        cmb = self.inputs["year"]
        value = cmb.itemData(index) or ""
        if value != self.store.value("year"):
            self.store.set_field("year", value)

    def _on_choose_photo_clicked(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Choose Photo", "", _IMAGE_FILTER)
        if not path:
            return
        try:
            candidate = load_image_candidate(path)
        except OSError as e:
            QMessageBox.critical(self, "Error", f"Failed to read the selected file.\n\nDetails:\n{e!r}")
            return
        self.select_profile_picture(candidate)

    def _on_submit_clicked(self) -> None:
        self.submit(show_message=True)

    def select_profile_picture(self, candidate: Optional[ImageCandidate]) -> bool:
        return self.store.set_profile_picture(candidate)

    def submit(self, *, show_message: bool) -> Optional[SubmissionOutcome]:
        """Returns None if the sink raised (the error is logged and shown)."""
        try:
            outcome = self.flow.submit()
        except Exception as e:
            logger.exception("Registration submission failed")
            if show_message:
                QMessageBox.critical(self, "Error", f"Failed to submit registration.\n\nDetails:\n{e!r}")
            return None

        if outcome.accepted:
            self.registration_submitted.emit(dict(outcome.snapshot))
            if show_message:
                if outcome.sink_result is False:
                    QMessageBox.warning(self, "Warning", "Registration was not accepted. Please try again.")
                else:
                    QMessageBox.information(self, "Information", "Registration submitted successfully!")
            return outcome

        if show_message:
            lines = [f"- {msg}" for msg in outcome.field_errors.values()]
            QMessageBox.warning(
                self,
                "Validation Error",
                "Please fix the following issues:\n\n" + "\n".join(lines),
            )
        return outcome

    def closeEvent(self, event) -> None:
        self._unsubscribe()
        self.store.dispose()
        super().closeEvent(event)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def _render(self, store: FormStateStore) -> None:
        errors = store.errors
        focused = store.focused_field

        for name, widget in self.inputs.items():
            self._sync_widget_value(widget, store.value(name))
            if errors.get(name):
                state = "error"
            elif focused == name:
                state = "focused"
            else:
                state = ""
            self._set_state(widget, state)

        for name, label in self.error_labels.items():
            msg = errors.get(name, "")
            label.setText(msg)
            label.setVisible(bool(msg))

        self._render_preview(store)

    def _sync_widget_value(self, widget: FieldWidget, value: Any) -> None:
        text = "" if value is None else str(value)
        if isinstance(widget, QComboBox):
            index = widget.findData(text)
            if index < 0:
                index = 0
            if widget.currentIndex() != index:
                widget.blockSignals(True)
                widget.setCurrentIndex(index)
                widget.blockSignals(False)
            return
        if widget.text() != text:
            widget.blockSignals(True)
            widget.setText(text)
            widget.blockSignals(False)

    def _set_state(self, widget: QWidget, state: str) -> None:
        if widget.property("state") == state:
            return
        widget.setProperty("state", state)
        widget.style().unpolish(widget)
        widget.style().polish(widget)

    def _render_preview(self, store: FormStateStore) -> None:
        reference = store.preview_reference
        if reference == self._shown_preview:
            return
        self._shown_preview = reference

        if reference is None:
            self.preview_label.clear()
            self.preview_label.setText("No photo")
            return

        picture = store.preview_provider.resolve(reference)

        pixmap = QPixmap()
        if not pixmap.loadFromData(picture.data):
            # Accepted by media type only; nothing to draw
            self.preview_label.clear()
            self.preview_label.setText(picture.file_name)
            return

        size = self._settings.preview_size
        self.preview_label.setPixmap(
            pixmap.scaled(size, size, Qt.KeepAspectRatioByExpanding, Qt.SmoothTransformation)
        )
