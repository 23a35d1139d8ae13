"""Environment diagnostics."""

from .doctor import run_doctor

__all__ = ["run_doctor"]
