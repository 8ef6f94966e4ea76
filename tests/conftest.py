import sys
from pathlib import Path

import pytest

# Ensure the 'simdup' package (repo root/src) is importable without installation
SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def clean_env(monkeypatch):
    names = ("METHOD", "FEATURES", "N", "MAX_DIFF", "INDEX", "WORD_POLICY", "KEY", "CONFIG", "LOG_LEVEL")
    for name in names:
        monkeypatch.delenv(f"SIMDUP_{name}", raising=False)
    return monkeypatch
