"""Allow running PlankIt as a module: python -m plankit."""

import sys

from loguru import logger
from PyQt6.QtWidgets import QApplication

from .app import PlankItApp
from .logger import setup_logger
from .settings import APP_SUPPORT_DIR, load_settings


def main() -> None:
    settings = load_settings()
    setup_logger(settings.log_level, log_file=APP_SUPPORT_DIR / "plankit.log")

    app = QApplication(sys.argv)
    app.setApplicationName("PlankIt")
    app.setOrganizationName("PlankIt")

    window = PlankItApp(settings)
    window.show()
    logger.info("PlankIt ready!")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
