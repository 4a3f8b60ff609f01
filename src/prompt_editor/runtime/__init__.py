"""Runtime services shared by every engine layer."""

from . import telemetry

__all__ = ["telemetry"]
