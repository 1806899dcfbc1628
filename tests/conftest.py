import sys
from pathlib import Path

import pytest

# Repository root on sys.path so tests can import scripts.run and friends.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _run_from_repo_root(monkeypatch):
    """Relative paths (config/config.yaml, data/input/...) resolve against the repo root."""
    monkeypatch.chdir(ROOT)
