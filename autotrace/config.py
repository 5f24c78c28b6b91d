"""Runtime settings read from environment variables."""

import math
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_AVERAGE_MONTHLY_KM = 1000


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration."""

    average_monthly_km: float = DEFAULT_AVERAGE_MONTHLY_KM
    vehicles_dir: Path = Path("vehicles")
    secret_key: str = "dev-secret-key-change-in-prod"
    log_level: str = "INFO"
    certificate_issuer: str = "AutoTrace"
    certificate_title: str = "AutoTrace Digital Certificate"

    def __post_init__(self):
        if not math.isfinite(self.average_monthly_km) or self.average_monthly_km <= 0:
            raise ValueError(
                f"Default average monthly km must be a positive number, got {self.average_monthly_km}"
            )


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from an environment mapping (defaults to os.environ)."""
    env = os.environ if environ is None else environ

    raw_rate = env.get("AUTOTRACE_AVERAGE_MONTHLY_KM")
    try:
        rate = float(raw_rate) if raw_rate else DEFAULT_AVERAGE_MONTHLY_KM
    except ValueError:
        raise ValueError(f"AUTOTRACE_AVERAGE_MONTHLY_KM is not a number: {raw_rate!r}") from None

    return Settings(
        average_monthly_km=rate,
        vehicles_dir=Path(env.get("AUTOTRACE_VEHICLES_DIR", "vehicles")),
        secret_key=env.get("SECRET_KEY", "dev-secret-key-change-in-prod"),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings for the current process, loaded once."""
    return load_settings()
