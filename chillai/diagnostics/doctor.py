"""
Environment diagnostics for the ChillAI SDK.

The diagnostics are lightweight so they can run quickly from the CLI
(`chillai doctor`) and during CI checks. Each diagnostic returns a dictionary
with a human-readable description, status, and optional details.
"""

from __future__ import annotations

import importlib
import platform
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from chillai.utils.config_reference import SCHEMA_PATH

MIN_PYTHON = (3, 9)
CRITICAL_DEPENDENCIES = [
    "numpy",
    "pandas",
    "loguru",
    "omegaconf",
    "yaml",
]
OPTIONAL_DEPENDENCIES = [
    "mlflow",
]


@dataclass
class CheckResult:
    """Structured diagnostic result."""

    check: str
    status: str
    details: Optional[str] = None

    def as_dict(self) -> Dict[str, Optional[str]]:
        payload = asdict(self)
        if payload["details"] is None:
            payload.pop("details")
        return payload


def _status(ok: bool) -> str:
    return "pass" if ok else "fail"


def _check_python_version() -> CheckResult:
    current = sys.version_info
    ok = current >= MIN_PYTHON
    details = f"Detected Python {current.major}.{current.minor}.{current.micro}"
    if not ok:
        details += f" (requires >= {MIN_PYTHON[0]}.{MIN_PYTHON[1]})"
    return CheckResult(check="Python runtime", status=_status(ok), details=details)


def _check_dependency(module_name: str, *, optional: bool = False) -> CheckResult:
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        return CheckResult(
            check=f"Python package '{module_name}' import",
            status="warn" if optional else "fail",
            details=f"{exc.__class__.__name__}: {exc}",
        )
    version = getattr(module, "__version__", "unknown")
    return CheckResult(check=f"Python package '{module_name}' import", status="pass", details=str(version))


def _check_paths(networks_dir: Path, experiments_dir: Path) -> Iterable[CheckResult]:
    if SCHEMA_PATH.exists():
        yield CheckResult(check="Default config schema", status="pass", details=str(SCHEMA_PATH))
    else:
        yield CheckResult(check="Default config schema", status="fail", details=f"Missing at {SCHEMA_PATH}")

    for label, path in {"Network save directory": networks_dir, "Experiments directory": experiments_dir}.items():
        if path.exists():
            yield CheckResult(check=label, status="pass", details=str(path.resolve()))
        else:
            yield CheckResult(check=label, status="warn", details="Will be created automatically.")


def _check_platform() -> CheckResult:
    details = f"{platform.system()} {platform.release()} ({platform.machine()})"
    return CheckResult(check="Platform", status="pass", details=details)


def run_doctor(
    networks_dir: Union[str, Path] = "networks",
    experiments_dir: Union[str, Path] = "experiments",
) -> List[Dict[str, Optional[str]]]:
    """
    Execute environment diagnostics and return structured results.

    Returns
    -------
    list of dict
        Each dictionary contains `check`, `status`, and optional `details`.
        Status is one of ``pass``, ``warn``, or ``fail``.
    """

    results: List[CheckResult] = [
        _check_platform(),
        _check_python_version(),
    ]

    for module in CRITICAL_DEPENDENCIES:
        results.append(_check_dependency(module))

    for module in OPTIONAL_DEPENDENCIES:
        results.append(_check_dependency(module, optional=True))

    results.extend(_check_paths(Path(networks_dir), Path(experiments_dir)))

    return [result.as_dict() for result in results]
