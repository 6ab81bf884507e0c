# Shared fixtures. Qt tests run on the offscreen platform so no display is needed.

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session")
def qapp():
    from PyQt6.QtWidgets import QApplication

    return QApplication.instance() or QApplication(sys.argv)  # type: ignore


@pytest.fixture
def score_rows():
    return [
        {"id": 1, "name": "Gamma", "score": "10", "group": "b"},
        {"id": 2, "name": "Alpha", "score": "2", "group": "a"},
        {"id": 3, "name": "Beta", "score": "10", "group": "a"},
        {"id": 4, "name": "Delta", "score": "7", "group": "b"},
    ]
