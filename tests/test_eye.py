import math

import numpy as np
import pytest

from exceptions import InvalidConfiguration
from eye import Eye, wrapped_delta

BOUNDS = (1.0, 1.0)


def _eye():
    return Eye(fov_range=0.25, fov_angle=math.pi + math.pi / 4, cells=9)


def test_no_food_sees_nothing():
    vision = _eye().process_vision((0.5, 0.5), 0.0, np.empty((0, 2)), BOUNDS)
    np.testing.assert_array_equal(vision, np.zeros(9))


def test_food_straight_ahead_lands_in_middle_cell():
    vision = _eye().process_vision((0.5, 0.5), 0.0, [(0.6, 0.5)], BOUNDS)
    assert vision[4] == pytest.approx((0.25 - 0.1) / 0.25)
    assert np.count_nonzero(vision) == 1


def test_food_behind_or_out_of_range_is_invisible():
    eye = _eye()
    behind = eye.process_vision((0.5, 0.5), 0.0, [(0.4, 0.5)], BOUNDS)
    too_far = eye.process_vision((0.5, 0.5), 0.0, [(0.8, 0.5)], BOUNDS)
    assert not behind.any()
    assert not too_far.any()


def test_closer_food_is_brighter():
    eye = _eye()
    near = eye.process_vision((0.5, 0.5), 0.0, [(0.55, 0.5)], BOUNDS)
    far = eye.process_vision((0.5, 0.5), 0.0, [(0.7, 0.5)], BOUNDS)
    assert near.sum() > far.sum() > 0


def test_vision_follows_heading():
    eye = _eye()
    # heading north, food to the north
    vision = eye.process_vision((0.5, 0.5), math.pi / 2, [(0.5, 0.6)], BOUNDS)
    assert vision[4] > 0


def test_vision_sees_across_the_wrap():
    vision = _eye().process_vision((0.99, 0.5), 0.0, [(0.05, 0.5)], BOUNDS)
    assert vision[4] == pytest.approx((0.25 - 0.06) / 0.25)


def test_wrapped_delta_takes_short_way():
    delta = wrapped_delta((0.95, 0.05), [(0.05, 0.95)], BOUNDS)
    np.testing.assert_allclose(delta, [[0.1, -0.1]])


@pytest.mark.parametrize("kwargs", [{"fov_range": 0}, {"fov_angle": 0}, {"cells": 0}])
def test_bad_eye_configuration(kwargs):
    with pytest.raises(InvalidConfiguration):
        Eye(**kwargs)
