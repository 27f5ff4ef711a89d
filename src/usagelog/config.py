"""Application configuration and environment loading."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

DEFAULT_PERIOD_SECONDS = 60
DEFAULT_DESTINATION = "logs/"
DEFAULT_KUBECONFIG = Path.home() / ".kube" / "config"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class SnapshotConfig:
    """Immutable settings shared by the scheduler and the writer."""

    cluster_id: str
    period_seconds: int = DEFAULT_PERIOD_SECONDS
    destination_path: Path = Path(DEFAULT_DESTINATION)
    internal: bool = True
    kubeconfig: Path = DEFAULT_KUBECONFIG
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.cluster_id.strip():
            raise ValueError("A cluster id must be provided.")
        if self.period_seconds < 1:
            raise ValueError(
                f"Snapshot period must be at least 1 second, got {self.period_seconds}."
            )


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}.")


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc


def load_config(env_path: Path = Path(".env"), **overrides: Any) -> SnapshotConfig:
    """Load config from environment and optional .env file.

    Keyword overrides (typically CLI flags) win over the environment; a
    value of None means "not given".
    """
    load_dotenv(env_path, override=False)
    values: dict[str, Any] = {
        "cluster_id": os.getenv("USAGE_LOG_CLUSTER_ID", ""),
        "period_seconds": DEFAULT_PERIOD_SECONDS,
        "destination_path": Path(
            os.getenv("USAGE_LOG_DESTINATION", DEFAULT_DESTINATION)
        ),
        "internal": True,
        "kubeconfig": DEFAULT_KUBECONFIG,
        "log_level": os.getenv("USAGE_LOG_LEVEL", "INFO"),
    }

    period_raw = os.getenv("USAGE_LOG_PERIOD")
    if period_raw:
        values["period_seconds"] = _parse_int("USAGE_LOG_PERIOD", period_raw)
    internal_raw = os.getenv("USAGE_LOG_INTERNAL")
    if internal_raw:
        values["internal"] = _parse_bool("USAGE_LOG_INTERNAL", internal_raw)
    kubeconfig_raw = os.getenv("KUBECONFIG")
    if kubeconfig_raw:
        values["kubeconfig"] = Path(kubeconfig_raw)

    for key, value in overrides.items():
        if key not in values:
            raise ValueError(f"Unknown configuration option: {key}")
        if value is None:
            continue
        if key in {"destination_path", "kubeconfig"}:
            value = Path(value)
        values[key] = value

    values["log_level"] = str(values["log_level"]).upper()
    return SnapshotConfig(**values)
