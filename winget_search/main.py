import sys

from PySide6.QtWidgets import QApplication

from winget_search.logging import init_logger
from winget_search.presentation.main_window import MainWindow


def main() -> int:
    init_logger()
    app = QApplication(sys.argv)
    w = MainWindow()
    w.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
