from __future__ import annotations

import sys
from pathlib import Path

# Ensure `import slopeone` works from a plain checkout (no `pip install -e .`).
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))
