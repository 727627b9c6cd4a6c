"""Environment-variable-based configuration for the nightly scheduler."""

from __future__ import annotations

import os
from pathlib import Path

DATA_DIR: Path = Path(os.environ.get("ENGINE_DATA_DIR", "data/athletes")).expanduser()
OUTPUT_DIR: Path = Path(os.environ.get("ENGINE_OUTPUT_DIR", "data/output")).expanduser()
NIGHTLY_HOUR: int = int(os.environ.get("SCHEDULER_HOUR", "21"))
NIGHTLY_MINUTE: int = int(os.environ.get("SCHEDULER_MINUTE", "0"))
