"""Settings for calcpad, read from CALCPAD_* environment variables.

    CALCPAD_GROUPING   digit grouping name (default: south-asian)
    CALCPAD_PRECISION  fractional digits kept when rounding results (default: 13)
    CALCPAD_LOG_LEVEL  logging level for the calcpad logger (default: WARNING)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from calcpad.engine import DEFAULT_PRECISION, MAX_PRECISION, CalculatorEngine
from calcpad.formatting import get_grouping

DEFAULT_GROUPING = "south-asian"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    """Engine and logging settings."""

    grouping: str = DEFAULT_GROUPING
    precision: int = DEFAULT_PRECISION
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        """Build settings from the environment (os.environ by default).

        Raises:
            ValueError: unknown grouping, or a precision that is not an
                integer from 0 to MAX_PRECISION.
        """
        env = os.environ if environ is None else environ
        grouping = env.get("CALCPAD_GROUPING", DEFAULT_GROUPING)
        get_grouping(grouping)

        raw_precision = env.get("CALCPAD_PRECISION", str(DEFAULT_PRECISION))
        try:
            precision = int(raw_precision)
        except ValueError:
            raise ValueError(f"CALCPAD_PRECISION must be an integer, got {raw_precision!r}") from None
        if not 0 <= precision <= MAX_PRECISION:
            raise ValueError(f"CALCPAD_PRECISION must be between 0 and {MAX_PRECISION}, got {precision}")

        log_level = env.get("CALCPAD_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        return cls(grouping=grouping, precision=precision, log_level=log_level)

    def build_engine(self) -> CalculatorEngine:
        """Create a fresh engine with these settings."""
        return CalculatorEngine(grouping=get_grouping(self.grouping), precision=self.precision)
