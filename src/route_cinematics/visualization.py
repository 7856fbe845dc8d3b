"""Route and camera waypoint plotting."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Sequence

import numpy as np

from .geo import as_latlng_array

if TYPE_CHECKING:
    from .config import RouteVisualizationConfig
    from .waypoints import Waypoint

logger = logging.getLogger(__name__)

try:
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    _HAS_MATPLOTLIB = True
except ImportError:
    _HAS_MATPLOTLIB = False


def plot_waypoints(
    waypoints: Sequence["Waypoint"],
    route_points: Any = None,
    show_headings: bool = True,
    title: Optional[str] = None,
    viz_config: Optional["RouteVisualizationConfig"] = None,
    output_path: Optional[Path] = None,
    ax: Any = None,
) -> Any:
    """Plot camera waypoints (longitude on x, latitude on y).

    Args:
        waypoints: Waypoints with ``lat``, ``lng`` and ``heading``.
        route_points: Optional raw route path drawn underneath.
        show_headings: Draw heading arrows when True.
        title: Plot title.
        viz_config: Visual style overrides.
        output_path: Save PNG to this path when set.
        ax: Existing matplotlib Axes to draw on. A new figure is created if None.

    Returns:
        The matplotlib Axes object used for drawing.
    """
    if not _HAS_MATPLOTLIB:
        raise ImportError(
            "matplotlib is required for waypoint visualization. "
            "Install it with: pip install matplotlib"
        )

    from .config import RouteVisualizationConfig
    cfg = viz_config or RouteVisualizationConfig()

    if not waypoints:
        logger.warning("No waypoints to plot.")
        return ax

    created_fig = False
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(10, 10))
        created_fig = True

    if route_points is not None:
        route = as_latlng_array(route_points)
        if len(route):
            ax.plot(
                route[:, 1], route[:, 0],
                color=cfg.route_color,
                linewidth=cfg.route_linewidth,
                linestyle="--",
                label="Route",
                zorder=10,
            )

    lat = np.array([w.lat for w in waypoints], dtype=float)
    lng = np.array([w.lng for w in waypoints], dtype=float)
    headings = np.radians([w.heading for w in waypoints])

    ax.plot(
        lng, lat,
        color=cfg.path_color,
        linewidth=cfg.path_linewidth,
        marker=".",
        alpha=0.8,
        label="Camera Path",
        zorder=15,
    )
    ax.scatter(
        lng[0], lat[0],
        color=cfg.start_color, s=cfg.marker_size, marker="^",
        edgecolors="white", zorder=20, label="Start",
    )
    ax.scatter(
        lng[-1], lat[-1],
        color=cfg.end_color, s=cfg.marker_size, marker="s",
        edgecolors="white", zorder=20, label="End",
    )

    if show_headings:
        extent = max(float(np.ptp(lat)), float(np.ptp(lng)), 1e-6)
        length = extent * cfg.arrow_length_fraction
        step = max(1, len(waypoints) // max(cfg.max_arrows, 1))
        idx = np.arange(0, len(waypoints), step)
        # Heading 0 points north (+lat), 90 points east (+lng).
        ax.quiver(
            lng[idx], lat[idx],
            np.sin(headings[idx]) * length,
            np.cos(headings[idx]) * length,
            color=cfg.arrow_color,
            angles="xy",
            scale_units="xy",
            scale=1.0,
            width=0.003,
            alpha=0.6,
            zorder=16,
        )

    ax.set_aspect("equal", "datalim")
    ax.set_xlabel("Longitude (deg)")
    ax.set_ylabel("Latitude (deg)")
    if title:
        ax.set_title(title)
    ax.legend(loc="upper right", fontsize=8)

    if output_path is not None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        ax.get_figure().savefig(str(output_path), dpi=150, bbox_inches="tight")
        logger.info("Saved waypoint plot to %s", output_path)

    if created_fig:
        plt.close(fig)

    return ax
