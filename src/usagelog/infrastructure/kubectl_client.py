"""Shared kubectl execution helpers."""

import json
import shlex
import subprocess
from pathlib import Path
from typing import Any, cast


class KubectlError(RuntimeError):
    """Raised when kubectl command execution fails."""


def _run_kubectl(
    command: str,
    *,
    kubeconfig: Path | None,
    timeout_seconds: float | None,
) -> subprocess.CompletedProcess[str]:
    args = ["kubectl", *shlex.split(command), "-o", "json"]
    if kubeconfig is not None:
        args.extend(["--kubeconfig", str(kubeconfig)])
    try:
        return subprocess.run(
            args,
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout_seconds,
        )
    except subprocess.CalledProcessError as exc:
        stderr = exc.stderr.strip() if exc.stderr else str(exc)
        raise KubectlError(f"kubectl command failed: {stderr}") from exc
    except subprocess.TimeoutExpired as exc:
        raise KubectlError(f"kubectl command timed out after {exc.timeout}s") from exc
    except FileNotFoundError as exc:
        raise KubectlError("kubectl executable not found on PATH") from exc


def kubectl_json(
    command: str,
    *,
    kubeconfig: Path | None = None,
    timeout_seconds: float | None = None,
) -> dict[str, Any]:
    """Execute kubectl command and parse JSON output."""
    result = _run_kubectl(
        command, kubeconfig=kubeconfig, timeout_seconds=timeout_seconds
    )
    try:
        return cast(dict[str, Any], json.loads(result.stdout) if result.stdout else {})
    except json.JSONDecodeError as exc:
        raise KubectlError(f"kubectl returned invalid JSON: {exc}") from exc
