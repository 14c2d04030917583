"""Runtime configuration for request synthesis and execution."""

import os
from pathlib import Path

from pydantic import BaseModel, Field

from openapi_tryout.synth.models import HeaderRow

DEFAULT_FALLBACK_URL = "https://api.example.com"
DEFAULT_TIMEOUT = 30.0
DEFAULT_STORE_DIR = Path.home() / ".openapi-tryout" / "specs"


def _default_headers() -> list[HeaderRow]:
    return [
        HeaderRow(enabled=True, key="Content-Type", value="application/json"),
        HeaderRow(enabled=True, key="Accept", value="application/json"),
    ]


class SynthConfig(BaseModel):
    """Defaults applied when seeding a request from a document."""

    default_headers: list[HeaderRow] = Field(default_factory=_default_headers)
    fallback_url: str = DEFAULT_FALLBACK_URL  # used when a document declares no servers
    timeout: float = DEFAULT_TIMEOUT  # seconds
    store_dir: Path = DEFAULT_STORE_DIR

    @classmethod
    def from_env(cls) -> "SynthConfig":
        return cls(
            fallback_url=os.getenv("TRYOUT_FALLBACK_URL", DEFAULT_FALLBACK_URL),
            timeout=float(os.getenv("TRYOUT_TIMEOUT", DEFAULT_TIMEOUT)),
            store_dir=Path(os.getenv("TRYOUT_STORE_DIR", str(DEFAULT_STORE_DIR))),
        )
