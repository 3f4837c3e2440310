import logging
import sys

from PySide6.QtWidgets import QApplication

from student_registration.core.settings import configure_logging, load_settings
from student_registration.ui.main_windows import MainWindow


logger = logging.getLogger(__name__)


def main() -> int:
    settings = load_settings()
    configure_logging(settings.log_level)
    logger.info("Starting %s", settings.title)

    app = QApplication(sys.argv)
    win = MainWindow(settings=settings)
    win.resize(800, 900)
    win.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
