"""Test package for safelist."""

import sys
from pathlib import Path

# The benchmark harness lives beside the package, outside the installed tree.
_ROOT = str(Path(__file__).resolve().parents[1])
if _ROOT not in sys.path:
    sys.path.insert(0, _ROOT)
