# student_registration/ui/main_windows.py
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QLabel,
    QScrollArea,
    QFrame,
    QMenuBar,
)

from student_registration.core.settings import Settings
from student_registration.core.submission import SubmissionSink
from student_registration.ui.registration_form import RegistrationForm


class MainWindow(QMainWindow):
    """
    Main window:
      - Header title
      - Scrollable registration form
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        sink: Optional[SubmissionSink] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings or Settings()
        self.setWindowTitle(self._settings.title)

        header = QLabel(self._settings.title)
        header_font = header.font()
        header_font.setBold(True)
        header_font.setPointSize(header_font.pointSize() + 6)
        header.setFont(header_font)
        header.setAlignment(Qt.AlignCenter)

        self.form = RegistrationForm(sink=sink, settings=self._settings)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.NoFrame)
        scroll.setWidget(self.form)

        container = QWidget()
        root_layout = QVBoxLayout(container)
        root_layout.setContentsMargins(0, 12, 0, 0)
        root_layout.addWidget(header)
        root_layout.addWidget(scroll, 1)
        self.setCentralWidget(container)

        self._build_menu()

    # ----------------------------------------------------------------------------------
    # Menu
    # ----------------------------------------------------------------------------------
    def _build_menu(self) -> None:
        menubar = QMenuBar(self)
        self.setMenuBar(menubar)

        menu_file = menubar.addMenu("File")

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)
        menu_file.addAction(self.act_exit)

    def closeEvent(self, event) -> None:
        # Child widgets get no closeEvent of their own; tear the form down here.
        self.form.close()
        super().closeEvent(event)
