"""
Application Initialization
==========================
Builds the main window and starts the Qt event loop.

Why is this file needed?
------------------------
It acts as the composition root. It:
1. Configures logging (--log-level, else COORDINATEDIAGRAMS_LOG_LEVEL).
2. Creates the QApplication and the MainWindow.
3. Picks the initial diagram from the command line.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from coordinatediagrams.logging_config import setup_logging
from coordinatediagrams.model.diagrams import list_keys

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="coordinatediagrams", description="Interactive coordinate-system diagrams.")
    parser.add_argument("diagram", nargs="?", choices=list_keys(), help="diagram shown at startup")
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, ... (default: COORDINATEDIAGRAMS_LOG_LEVEL or INFO)")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=args.log_level, log_file=args.log_file)

    # Qt is imported late so `--help` works without a display
    from PySide6.QtWidgets import QApplication
    from coordinatediagrams.view.main_window import MainWindow

    # 2. Create the Qt Application
    app = QApplication(sys.argv[:1])
    app.setApplicationName("Coordinate Diagrams")

    # 3. Initialize the Main Window
    window = MainWindow(args.diagram)
    window.show()

    # 4. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
