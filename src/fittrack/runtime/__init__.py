from __future__ import annotations

from .app import create_app
from .server import FitTrackServer, run
from .shell import FitnessShell

__all__ = ["create_app", "FitTrackServer", "run", "FitnessShell"]
