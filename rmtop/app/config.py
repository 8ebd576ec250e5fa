from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from rmtop.core.errors import ConfigError

INTERVAL_BOUNDS = (1, 3600)
TIMEOUT_BOUNDS = (1, 300)


def _check_range(name: str, value: int, bounds: tuple[int, int]) -> None:
    lo, hi = bounds
    if not lo <= value <= hi:
        raise ConfigError(
            f"Invalid {name}: {value}.",
            hint=f"Use a value between {lo} and {hi}.",
            details={"param": name, "value": value},
        )


@dataclass(frozen=True)
class MonitorConfig:
    host: str = "127.0.0.1"
    port: int = 6379
    password: Optional[str] = field(default=None, repr=False)
    timeout_s: int = 3
    interval_s: int = 60
    monitor_command: str = "MONITOR"
    url: Optional[str] = None
    commands_path: Optional[str] = None
    records_file: Optional[str] = None
    decode_workers: int = 1
    color: bool = True

    def __post_init__(self) -> None:
        _check_range("interval", self.interval_s, INTERVAL_BOUNDS)
        _check_range("timeout", self.timeout_s, TIMEOUT_BOUNDS)
        _check_range("port", self.port, (1, 65535))
        if self.decode_workers < 1:
            raise ConfigError(
                f"Invalid decode workers: {self.decode_workers}.",
                hint="Use at least 1 worker.",
            )
        if not self.monitor_command.strip():
            raise ConfigError("Monitor command must not be empty.")

    @property
    def driver(self) -> str:
        return "url" if self.url else "tcp"

    def transport_params(self) -> dict:
        if self.url:
            return {"url": self.url}
        return {"host": self.host, "port": self.port, "connect_timeout": float(self.timeout_s)}
