from __future__ import annotations

from pathlib import Path
import sys
import unittest

import numpy as np


SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from route_cinematics.config import ResamplingConfig
from route_cinematics.geo import initial_bearing, normalize_heading, wrap_heading_delta
from route_cinematics.heading import HeadingEstimator, blend_headings
from route_cinematics.resample import ResampledPath, resample_path


def _angular_gap(a: float, b: float) -> float:
    return abs(float(wrap_heading_delta(a - b)))


class HeadingMathTest(unittest.TestCase):
    def test_cardinal_bearings(self) -> None:
        origin = np.array([0.0, 0.0])
        self.assertAlmostEqual(initial_bearing(origin, np.array([0.001, 0.0])), 0.0)
        self.assertAlmostEqual(initial_bearing(origin, np.array([0.0, 0.001])), 90.0)
        self.assertAlmostEqual(initial_bearing(origin, np.array([-0.001, 0.0])), 180.0)
        self.assertAlmostEqual(initial_bearing(origin, np.array([0.0, -0.001])), 270.0)

    def test_normalize_heading_never_returns_360(self) -> None:
        self.assertEqual(normalize_heading(-1e-14), 0.0)
        self.assertEqual(normalize_heading(360.0), 0.0)
        self.assertAlmostEqual(normalize_heading(-90.0), 270.0)
        self.assertAlmostEqual(normalize_heading(725.0), 5.0)

    def test_blend_takes_the_short_way_across_north(self) -> None:
        blended = blend_headings(350.0, 10.0, momentum=0.8, smoothness=4)

        # 20 deg * ease(0.8)=0.896 * damping 0.6 past 350.
        self.assertAlmostEqual(blended, 0.752, places=9)

    def test_zero_momentum_keeps_previous_heading(self) -> None:
        self.assertAlmostEqual(blend_headings(45.0, 135.0, momentum=0.0, smoothness=4), 45.0)

    def test_damping_floor_applies_at_high_smoothness(self) -> None:
        high = blend_headings(0.0, 90.0, momentum=1.0, smoothness=20)
        self.assertAlmostEqual(high, 27.0)


class HeadingEstimatorTest(unittest.TestCase):
    def _estimate(self, path: np.ndarray, policy: str, interval: float = 20.0) -> np.ndarray:
        config = ResamplingConfig(interval_distance=interval, heading_policy=policy)
        resampled = resample_path(path, interval)
        return HeadingEstimator(config).estimate(resampled, path)

    def test_straight_eastbound_route_faces_east_under_both_policies(self) -> None:
        path = np.array([[0.0, 0.0], [0.0, 0.002]])
        for policy in ("local", "momentum"):
            with self.subTest(policy=policy):
                headings = self._estimate(path, policy)
                self.assertTrue(all(_angular_gap(h, 90.0) < 1e-6 for h in headings))

    def test_local_last_waypoint_reuses_previous_heading(self) -> None:
        path = np.array([[0.0, 0.0], [0.001, 0.0], [0.001, 0.001]])
        headings = self._estimate(path, "local")
        self.assertEqual(headings[-1], headings[-2])

    def test_momentum_turn_is_gradual(self) -> None:
        path = np.array([[0.0, 0.0], [0.003, 0.0], [0.003, 0.003]])
        local = self._estimate(path, "local")
        momentum = self._estimate(path, "momentum")

        self.assertTrue(np.all((momentum >= 0.0) & (momentum < 360.0)))
        local_steps = np.abs(wrap_heading_delta(np.diff(local)))
        momentum_steps = np.abs(wrap_heading_delta(np.diff(momentum)))
        self.assertGreater(local_steps.max(), 45.0)
        self.assertLess(momentum_steps.max(), local_steps.max())
        self.assertLess(_angular_gap(momentum[-1], 90.0), 45.0)

    def test_first_waypoint_looks_at_least_three_samples_ahead(self) -> None:
        # Samples 1-2 lie east, sample 3 due north, sample 5 due west of the start.
        path = np.array(
            [[0.0, 0.0], [0.0, 0.001], [0.0, 0.002], [0.001, 0.0], [0.0, 0.003], [0.0, -0.001]]
        )
        start = ResampledPath(
            positions=path[:1],
            segment_indices=np.array([0]),
            distances=np.array([0.0]),
        )
        expected = {1: 0.0, 2: 0.0, 3: 0.0, 5: 270.0}
        for smoothness, heading in expected.items():
            with self.subTest(smoothness=smoothness):
                config = ResamplingConfig(smoothness=smoothness, heading_policy="momentum")
                estimated = HeadingEstimator(config).estimate(start, path)
                self.assertAlmostEqual(float(estimated[0]), heading, places=9)

    def test_momentum_schedule_on_a_fixed_look_target(self) -> None:
        # Every later sample sits due south of path[3], so its raw bearing is 0.
        path = np.array([[0.0, 0.0], [0.0, 0.001], [0.0, 0.002], [0.0, 0.003]])
        count = 10
        positions = np.vstack([path[:1], np.tile([[-0.002, 0.003]], (count - 1, 1))])
        resampled = ResampledPath(
            positions=positions,
            segment_indices=np.array([0] + [1] * (count - 1)),
            distances=np.arange(count, dtype=float),
        )
        config = ResamplingConfig(smoothness=1, heading_policy="momentum")
        headings = HeadingEstimator(config).estimate(resampled, path)

        self.assertAlmostEqual(headings[0], 90.0, places=9)
        # momentum 0.1: ease=0.028, damping 0.9 -> 90 * (1 - 0.0252)
        self.assertAlmostEqual(headings[1], 87.732, places=9)
        # momentum 0.2: ease=0.104 -> 87.732 * (1 - 0.0936)
        self.assertAlmostEqual(headings[2], 79.5202848, places=9)
        # momentum 0.7: ease=0.784; capped at 0.8 from k=8: ease=0.896
        self.assertAlmostEqual(headings[7] / headings[6], 1.0 - 0.784 * 0.9, places=9)
        self.assertAlmostEqual(headings[8] / headings[7], 1.0 - 0.896 * 0.9, places=9)
        self.assertAlmostEqual(headings[9] / headings[8], 1.0 - 0.896 * 0.9, places=9)

    def test_degenerate_path_defaults_to_north(self) -> None:
        path = np.array([[1.0, 1.0], [1.0, 1.0]])
        for policy in ("local", "momentum"):
            with self.subTest(policy=policy):
                headings = self._estimate(path, policy)
                self.assertEqual(headings.tolist(), [0.0])

    def test_empty_resampled_path_has_no_headings(self) -> None:
        estimator = HeadingEstimator(ResamplingConfig())
        headings = estimator.estimate(ResampledPath.empty(), np.empty((0, 2)))
        self.assertEqual(headings.shape, (0,))


if __name__ == "__main__":
    unittest.main()
