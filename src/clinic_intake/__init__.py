"""Clinic intake: duplicate detection and draft resolution for the clinic catalog."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("clinic-intake")
except PackageNotFoundError:
    __version__ = "0.0.0"
