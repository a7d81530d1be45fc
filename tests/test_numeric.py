"""
Test cases for the shared numeric guards: finite filtering, safe division, standard-deviation floors and population moments.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import math

import numpy as np
import pytest

from engine.numeric import (
    clamp,
    finite,
    finite_mask,
    floor_std,
    is_finite_number,
    pct_change,
    population_moments,
    safe_div,
)


def test_is_finite_number_rejects_non_numbers():
    assert is_finite_number(1)
    assert is_finite_number(2.5)
    assert is_finite_number("3.5")
    assert not is_finite_number(None)
    assert not is_finite_number(float("nan"))
    assert not is_finite_number(float("inf"))
    assert not is_finite_number(True)
    assert not is_finite_number("abc")


def test_finite_preserves_order():
    values = [3.0, None, float("nan"), 1.0, float("-inf"), 2.0]
    assert finite(values).tolist() == [3.0, 1.0, 2.0]
    assert finite_mask(values).tolist() == [True, False, False, True, False, True]
    assert finite([None, None]).size == 0


def test_safe_div_defaults():
    assert safe_div(6.0, 3.0) == 2.0
    assert safe_div(1.0, 0.0) == 0.0
    assert safe_div(1.0, 0.0, None) is None
    assert safe_div(float("nan"), 2.0, -1.0) == -1.0
    assert safe_div(1.0, float("inf"), 7.0) == 7.0


def test_floor_std():
    assert floor_std(0.0, 1e-7) == 1.0
    assert floor_std(0.005, 0.01, 1.0) == 1.0
    assert floor_std(2.0, 0.01) == 2.0
    assert floor_std(float("nan"), 0.01, 3.0) == 3.0


def test_population_moments():
    mean, variance, std = population_moments(np.array([1.0, 2.0, 3.0, 4.0, 5.0]))
    assert mean == pytest.approx(3.0)
    assert variance == pytest.approx(2.0)
    assert std == pytest.approx(math.sqrt(2.0))
    assert population_moments(np.array([])) == (0.0, 0.0, 0.0)


def test_pct_change_and_clamp():
    assert pct_change(120.0, 100.0) == pytest.approx(20.0)
    assert pct_change(5.0, 0.0) is None
    assert clamp(5.0, 0.0, 1.0) == 1.0
    assert clamp(-5.0, 0.0, 1.0) == 0.0
    assert clamp(0.5, 0.0, 1.0) == 0.5
