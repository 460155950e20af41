from __future__ import annotations

import os

from fastapi import FastAPI

from ..api import create_api_app
from ..core.registry import FitnessRegistry
from ..core.sample import seed_sample_data


def _sample_requested() -> bool:
    return os.getenv("FITTRACK_SAMPLE", "0") in {"1", "true", "True"}


def create_app(registry: FitnessRegistry | None = None, *, sample: bool | None = None) -> FastAPI:
    """Create the API app around `registry` (a fresh one when omitted).

    With `sample=True` (or FITTRACK_SAMPLE=1 when `sample` is None) a fresh
    registry gets the demo users seeded into it.
    """

    if registry is None:
        registry = FitnessRegistry()
        if sample or (sample is None and _sample_requested()):
            seed_sample_data(registry)
    return create_api_app(registry)
