"""
Eye for EvoSim creatures.

The eye splits its field of view into `cells` equal angular sectors
centred on the creature's heading. Every visible food item adds to the
cell it falls into; closer food counts more:

  energy = (fov_range - distance) / fov_range     (0 at the edge → 1 at the eye)

The resulting vector is what the creature's brain receives as input.
"""

import math

import numpy as np

from config import EYE_CELLS, FOV_ANGLE, FOV_RANGE
from exceptions import InvalidConfiguration


def wrapped_delta(origin, targets, bounds) -> np.ndarray:
    """
    Shortest displacement from `origin` to each of `targets` on a torus
    of size `bounds` (width, height).
    """
    bounds = np.asarray(bounds, dtype=np.float64)
    delta  = np.asarray(targets, dtype=np.float64) - np.asarray(origin, dtype=np.float64)
    return (delta + bounds / 2) % bounds - bounds / 2


class Eye:

    def __init__(self, fov_range: float = FOV_RANGE,
                 fov_angle: float = FOV_ANGLE,
                 cells: int = EYE_CELLS):
        if fov_range <= 0:
            raise InvalidConfiguration(f"fov_range must be > 0, got {fov_range}")
        if not 0 < fov_angle <= 2 * math.pi:
            raise InvalidConfiguration(f"fov_angle must be in (0, 2π], got {fov_angle}")
        if cells < 1:
            raise InvalidConfiguration(f"eye needs at least one cell, got {cells}")
        self.fov_range = float(fov_range)
        self.fov_angle = float(fov_angle)
        self.cells     = int(cells)

    def process_vision(self, position, rotation: float, food_positions,
                       bounds) -> np.ndarray:
        """
        Args:
            position:       (x, y) of the eye
            rotation:       heading in radians
            food_positions: array of shape (n_foods, 2)
            bounds:         (width, height) of the world

        Returns:
            float array of shape (cells,), values >= 0
        """
        cells = np.zeros(self.cells, dtype=np.float64)
        food_positions = np.asarray(food_positions, dtype=np.float64).reshape(-1, 2)
        if len(food_positions) == 0:
            return cells

        delta = wrapped_delta(position, food_positions, bounds)
        dist  = np.hypot(delta[:, 0], delta[:, 1])

        # bearing relative to heading, wrapped to [-π, π)
        angle = np.arctan2(delta[:, 1], delta[:, 0]) - rotation
        angle = (angle + math.pi) % (2 * math.pi) - math.pi

        half = self.fov_angle / 2
        visible = (dist < self.fov_range) & (angle >= -half) & (angle <= half)
        if not np.any(visible):
            return cells

        idx = ((angle[visible] + half) / self.fov_angle * self.cells).astype(int)
        idx = np.minimum(idx, self.cells - 1)
        energy = (self.fov_range - dist[visible]) / self.fov_range
        np.add.at(cells, idx, energy)
        return cells
