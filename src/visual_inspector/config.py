from __future__ import annotations

import os
from dataclasses import dataclass, fields

_ENV_PREFIX = "VISUAL_INSPECTOR_"


@dataclass(frozen=True)
class InspectorConfig:
    host: str = "127.0.0.1"
    http_port: int = 8080
    ws_port: int = 0  # 0 = let the OS pick a free port
    selection_timeout: float = 30.0  # seconds
    watch: bool = True
    watch_interval: float = 0.25
    watch_debounce: float = 0.1
    open_browser: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> InspectorConfig:
        """Build a config from ``VISUAL_INSPECTOR_*`` environment variables."""
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        for f in fields(cls):
            raw = env.get(_ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            overrides[f.name] = _coerce(f.type, raw)
        return cls(**overrides)

    @property
    def viewer_url(self) -> str:
        return f"http://{self.host}:{self.http_port}"


def _coerce(annotation: str, raw: str) -> object:
    if annotation == "int":
        return int(raw)
    if annotation == "float":
        return float(raw)
    if annotation == "bool":
        return raw.strip().lower() in ("1", "true", "yes", "on")
    return raw
