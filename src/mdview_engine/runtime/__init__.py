"""Runtime services shared by the viewer core."""

from . import telemetry

__all__ = ["telemetry"]
