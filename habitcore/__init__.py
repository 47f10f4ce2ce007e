"""
habitcore - Streak forecasting and adaptive habit coaching analytics

Packages:
    analytics/: Streak forecasts, risk classification, mood-aware difficulty
                adjustment and streak recovery plans

Modules:
    logging_config.py: structlog-backed log output for the CLI
"""

from pathlib import Path

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
ARGS_DIR = PROJECT_ROOT / "args"

__all__ = [
    "PROJECT_ROOT",
    "DATA_DIR",
    "ARGS_DIR",
]
