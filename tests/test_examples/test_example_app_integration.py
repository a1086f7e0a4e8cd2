"""Integration tests that exercise the example Django app entrypoint."""

import os
import subprocess
import sys
from pathlib import Path

EXAMPLES_DIR = Path(__file__).resolve().parents[2] / "examples"
REPO_ROOT = EXAMPLES_DIR.parent


def _run_example_manage(*args: str) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    env["DJANGO_SETTINGS_MODULE"] = "settings"
    env["PYTHONPATH"] = os.pathsep.join([str(REPO_ROOT), str(REPO_ROOT / "src")])
    return subprocess.run(
        [sys.executable, "manage.py", *args],
        cwd=EXAMPLES_DIR,
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )


def test_example_app_django_check_passes() -> None:
    result = _run_example_manage("check")
    assert result.returncode == 0, result.stderr


def test_example_schedule_dry_run() -> None:
    result = _run_example_manage("bootstrap_schedule", "--config", "schedule.example.toml", "--dry-run")
    assert result.returncode == 0, result.stderr
    assert "[DRY RUN] No database changes will be made." in result.stdout
    assert "Morning 09:00-12:00 [adult=200, student=100, child=50]" in result.stdout
    assert "Evening 18:00-22:00 [adult=300, student=0, child=0]" in result.stdout
