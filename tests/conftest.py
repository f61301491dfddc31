from __future__ import annotations

# Ensure `import serlcd` resolves to this checkout when the package is not installed.
import sys
from pathlib import Path

PROJECT_DIR = Path(__file__).resolve().parents[1]
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))
