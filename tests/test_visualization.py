from __future__ import annotations

from pathlib import Path
import sys
import tempfile
import unittest
from unittest.mock import patch

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

try:
    import matplotlib
    matplotlib.use("Agg")
    _HAS_MATPLOTLIB = True
except ImportError:
    _HAS_MATPLOTLIB = False

from route_cinematics.config import ResamplingConfig, RouteVisualizationConfig
from route_cinematics.waypoints import generate_waypoints


_ROUTE = [(0.0, 0.0), (0.002, 0.0), (0.002, 0.002), (0.004, 0.003)]


@unittest.skipUnless(_HAS_MATPLOTLIB, "matplotlib required")
class PlotWaypointsTest(unittest.TestCase):
    def setUp(self) -> None:
        self.waypoints = generate_waypoints(_ROUTE, ResamplingConfig(interval_distance=30.0))

    def test_smoke_renders_without_error(self) -> None:
        from route_cinematics.visualization import plot_waypoints

        ax = plot_waypoints(self.waypoints, route_points=_ROUTE)
        self.assertIsNotNone(ax)

    def test_saves_png_to_output_path(self) -> None:
        from route_cinematics.visualization import plot_waypoints

        with tempfile.TemporaryDirectory() as tmp_dir:
            out = Path(tmp_dir) / "plots" / "waypoints.png"
            plot_waypoints(self.waypoints, title="route", output_path=out)
            self.assertTrue(out.exists())
            self.assertGreater(out.stat().st_size, 0)

    def test_draws_on_existing_axes_without_closing(self) -> None:
        import matplotlib.pyplot as plt
        from route_cinematics.visualization import plot_waypoints

        fig, ax = plt.subplots()
        try:
            returned = plot_waypoints(
                self.waypoints,
                show_headings=False,
                viz_config=RouteVisualizationConfig(path_color="#000000"),
                ax=ax,
            )
            self.assertIs(returned, ax)
            self.assertTrue(plt.fignum_exists(fig.number))
            labels = [line.get_label() for line in ax.get_lines()]
            self.assertIn("Camera Path", labels)
        finally:
            plt.close(fig)

    def test_heading_arrows_are_capped(self) -> None:
        from route_cinematics.visualization import plot_waypoints

        cfg = RouteVisualizationConfig(max_arrows=3)
        ax = plot_waypoints(self.waypoints, viz_config=cfg)
        quivers = [c for c in ax.collections if c.__class__.__name__ == "Quiver"]
        self.assertEqual(len(quivers), 1)
        self.assertLessEqual(len(quivers[0].U), len(self.waypoints) // (len(self.waypoints) // 3) + 1)

    def test_empty_waypoints_warns_and_returns_axes_argument(self) -> None:
        from route_cinematics.visualization import plot_waypoints

        with self.assertLogs("route_cinematics.visualization", level="WARNING"):
            self.assertIsNone(plot_waypoints([]))


class PlotWaypointsWithoutMatplotlibTest(unittest.TestCase):
    def test_raises_helpful_import_error(self) -> None:
        from route_cinematics import visualization

        with patch.object(visualization, "_HAS_MATPLOTLIB", False):
            with self.assertRaisesRegex(ImportError, "matplotlib is required"):
                visualization.plot_waypoints([])


if __name__ == "__main__":
    unittest.main()
