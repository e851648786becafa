from pathlib import Path

import pytest

from VectorCalcEngine.Calculus.calculus_options import CalculusOptions
from VectorCalcEngine.Utils.Symbolic.symbolic import Var

ROOT_PATH = Path(__file__).parent


@pytest.fixture
def root_path():
    return ROOT_PATH


@pytest.fixture
def xyz():
    return Var("x"), Var("y"), Var("z")


@pytest.fixture
def python_options():
    """
    Options to generate plain python code (no numba compilation)
    """
    return CalculusOptions(use_numba=False)
