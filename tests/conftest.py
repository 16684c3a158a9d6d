import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from declension import DeclensionEngine
from declension_data import load_declension_data


@pytest.fixture(scope='session')
def data():
    loaded = load_declension_data()
    assert loaded is not None
    return loaded


@pytest.fixture(scope='session')
def engine(data):
    return DeclensionEngine(data)
