from __future__ import annotations

from pathlib import Path
import importlib
import importlib.util
import os
import shutil
import subprocess
import sys
import tempfile
import unittest

try:
    import tomllib
    _HAS_TOMLLIB = True
except ImportError:
    _HAS_TOMLLIB = False


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"


def _clean_env() -> dict[str, str]:
    env = os.environ.copy()
    env.pop("PYTHONPATH", None)
    return env


def _editable_install_command() -> list[str] | None:
    if importlib.util.find_spec("pip") is not None:
        return [sys.executable, "-m", "pip", "install", "-e", str(REPO_ROOT), "--no-deps"]
    uv_bin = shutil.which("uv")
    if uv_bin is not None:
        return [uv_bin, "pip", "install", "--python", sys.executable, "-e", str(REPO_ROOT), "--no-deps"]
    return None


@unittest.skipUnless(_HAS_TOMLLIB, "tomllib requires Python 3.11+")
class ProjectMetadataTest(unittest.TestCase):
    def setUp(self) -> None:
        with (REPO_ROOT / "pyproject.toml").open("rb") as handle:
            self.project = tomllib.load(handle)["project"]

    def test_rcin_script_points_at_cli_main(self) -> None:
        target = self.project["scripts"]["rcin"]
        module_name, _, attr = target.partition(":")
        self.assertEqual(module_name, "route_cinematics.cli")

        if str(SRC_DIR) not in sys.path:
            sys.path.insert(0, str(SRC_DIR))
        entry = getattr(importlib.import_module(module_name), attr)
        self.assertTrue(callable(entry))

    def test_runtime_dependencies_cover_numeric_and_video_stack(self) -> None:
        names = {dep.split(">")[0].split("=")[0].strip() for dep in self.project["dependencies"]}
        self.assertEqual(names, {"numpy", "opencv-python-headless"})
        self.assertIn("matplotlib>=3.5", self.project["optional-dependencies"]["viz"])


class EditableInstallTest(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        install_cmd = _editable_install_command()
        if install_cmd is None:
            raise unittest.SkipTest("Neither pip nor uv is available in this Python environment")
        subprocess.run(
            install_cmd,
            cwd=REPO_ROOT,
            env=_clean_env(),
            capture_output=True,
            text=True,
            check=True,
        )

    def _run_from_clean_cwd(self, *args: str) -> subprocess.CompletedProcess:
        with tempfile.TemporaryDirectory() as tmp_dir:
            return subprocess.run(
                [sys.executable, *args],
                cwd=tmp_dir,
                env=_clean_env(),
                capture_output=True,
                text=True,
                check=True,
            )

    def test_public_names_resolve_outside_the_checkout(self) -> None:
        proc = self._run_from_clean_cwd(
            "-c",
            "import route_cinematics as rc; "
            "print(len(rc.__all__)); "
            "print(','.join(n for n in rc.__all__ if not hasattr(rc, n)))",
        )
        count, missing = (proc.stdout.splitlines() + [""])[:2]
        self.assertGreater(int(count), 0)
        self.assertEqual(missing, "")

    def test_console_script_entry_point_loads(self) -> None:
        proc = self._run_from_clean_cwd(
            "-c",
            "from importlib import metadata; "
            "eps = [ep for ep in metadata.distribution('route-cinematics').entry_points "
            "if ep.group == 'console_scripts' and ep.name == 'rcin']; "
            "print(eps[0].value); print(callable(eps[0].load()))",
        )
        self.assertEqual(proc.stdout.split(), ["route_cinematics.cli:main", "True"])

    def test_cli_module_reports_installed_version(self) -> None:
        proc = self._run_from_clean_cwd("-m", "route_cinematics.cli", "--version")
        self.assertIn("0.1.0", proc.stdout + proc.stderr)


if __name__ == "__main__":
    unittest.main()
