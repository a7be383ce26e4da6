import os

# Qt widgets and QPainter need a platform plugin; tests never open a window.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from trefoil.model.parameters import ShapeParameters


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def params():
    return ShapeParameters()
