import sys
from PySide6.QtWidgets import QApplication

from bgvariants.ui.main_window import MainWindow
from bgvariants.util.log import setup_logging


def run_app() -> int:
    setup_logging("INFO")
    app = QApplication(sys.argv)

    window = MainWindow()
    window.show()

    return app.exec()
