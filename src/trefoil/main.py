"""
Application Initialization
==========================
This module constructs the MVC (Model-View-Controller) architecture and starts
the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Parses the command line and configures logging.
2. Instantiates the viewer state and the KnotController.
3. Passes the controller into the Main Window.
4. Prevents circular import errors by being the orchestrator.
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

from PySide6.QtWidgets import QApplication

from trefoil.config import BACKENDS
from trefoil.controller.knot import KnotController
from trefoil.logging_config import setup_logging
from trefoil.model.state import KnotState
from trefoil.view.main_window import MainWindow, VISIBLE_APP_NAME


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="trefoil", description="Interactive trefoil knot viewer.")
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default=None,
        help="Viewport backend (default: $TREFOIL_BACKEND or 'auto').",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging.")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    # 2. Create the Qt Application
    app = QApplication(sys.argv[:1])
    app.setApplicationName(VISIBLE_APP_NAME)

    # 3. Initialize the Data Model and Controller
    controller = KnotController(KnotState())

    # 4. Initialize the Main Window, passing the controller
    window = MainWindow(controller, backend=args.backend)
    window.show()

    # 5. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
