"""Shared waypoint output artifacts and serialization helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Any, Optional, Sequence

from .config import CaptureConfig
from .waypoints import Waypoint


def _path_for_summary(path: Path, *, base: Path | None = None) -> str:
    candidate = Path(path)
    if base is not None:
        try:
            return str(candidate.relative_to(base))
        except ValueError:
            pass
    try:
        return str(candidate.relative_to(Path.cwd()))
    except ValueError:
        return str(candidate)


@dataclass
class RouteCameraArtifacts:
    """Aggregate output metadata for one waypoint generation run."""

    route_source: str
    num_route_points: int
    num_smoothed_points: int
    route_length_m: float
    waypoints: list[Waypoint] = field(default_factory=list)
    output_dir: Optional[Path] = None
    output_file: Optional[Path] = None
    warnings: list[str] = field(default_factory=list)

    @property
    def num_waypoints(self) -> int:
        return len(self.waypoints)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "route_source": self.route_source,
            "num_route_points": self.num_route_points,
            "num_smoothed_points": self.num_smoothed_points,
            "num_waypoints": self.num_waypoints,
            "route_length_m": self.route_length_m,
            "warnings": list(self.warnings),
        }
        if self.output_dir is not None:
            payload["output_dir"] = _path_for_summary(self.output_dir)
        if self.output_file is not None:
            payload["output_file"] = _path_for_summary(self.output_file, base=self.output_dir)
        return payload


def write_waypoints(
    waypoints: Sequence[Waypoint],
    output_path_stem: Path,
    capture: Optional[CaptureConfig] = None,
) -> Path:
    """Serialize waypoints (with capture parameters when *capture* is set) into JSON."""
    output_path = output_path_stem.with_suffix(".json")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    records: list[dict[str, Any]] = []
    for index, waypoint in enumerate(waypoints):
        record: dict[str, Any] = {"id": index, **waypoint.to_dict()}
        if capture is not None:
            record["capture"] = waypoint.capture_params(capture)
        records.append(record)
    output_path.write_text(json.dumps(records, indent=2))
    return output_path


def read_waypoints(input_path: Path) -> list[Waypoint]:
    payload = json.loads(Path(input_path).read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise ValueError(f"Waypoint file must hold a JSON list: {input_path}")
    return [Waypoint.from_dict(item) for item in payload]
