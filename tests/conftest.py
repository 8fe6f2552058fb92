"""Shared fixtures for bounded integer tests."""

from __future__ import annotations

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from bounded import BoundedArithmetic, BoundedValue
from representation import INT8, TINY, UINT8


@pytest.fixture
def int8_max() -> BoundedValue:
    return BoundedValue(127, INT8)


@pytest.fixture
def int8_min() -> BoundedValue:
    return BoundedValue(-128, INT8)


@pytest.fixture
def tiny_calc() -> BoundedArithmetic:
    return BoundedArithmetic(TINY)


@pytest.fixture
def uint8_calc() -> BoundedArithmetic:
    return BoundedArithmetic(UINT8)
