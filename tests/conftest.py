import os
import random
import sys

import numpy as np
import pytest

# Modules live flat under classes/ and import each other by bare name
# (``from Config import Config``); make that work without an installation.
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CLASSES_DIR = os.path.join(ROOT_DIR, "classes")
if CLASSES_DIR not in sys.path:
    sys.path.insert(0, CLASSES_DIR)


@pytest.fixture(autouse=True)
def _set_seed():
    random.seed(1)
    np.random.seed(1)


@pytest.fixture
def rng():
    return np.random.default_rng(1)
