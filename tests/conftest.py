"""
Pytest configuration for replbook.

Ensures the repository root is on `sys.path` so `import replbook...` works
without installing the package, whatever the pytest import mode.
"""

from __future__ import annotations

import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
