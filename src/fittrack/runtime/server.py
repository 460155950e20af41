from __future__ import annotations

import contextlib
import logging
import os
import socket
import threading
import time
from dataclasses import dataclass, field

import uvicorn

from ..core.models import User, UserPatch, Workout
from ..core.registry import FitnessRegistry
from ..sdk.client import FitTrackClient
from .app import create_app

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FitTrackServer:
    """A server started in this process.

    The registry operations are served straight from the in-process registry,
    so this object can be used anywhere a `FitTrackClient` is accepted.
    """

    host: str
    port: int
    url: str
    registry: FitnessRegistry
    _uvicorn: uvicorn.Server = field(repr=False, compare=False)
    _thread: threading.Thread = field(repr=False, compare=False)

    def add_user(self, user_id: str, name: str, age: float, weight: float, height: float) -> User:
        return self.registry.add_user(user_id, name, age, weight, height)

    def log_workout(self, user_id: str, workout: Workout) -> Workout:
        return self.registry.log_workout(user_id, workout)

    def get_all_workouts_of(self, user_id: str) -> tuple[Workout, ...]:
        return self.registry.get_all_workouts_of(user_id)

    def get_all_workouts_by_type(self, user_id: str, workout_type: str) -> tuple[Workout, ...]:
        return self.registry.get_all_workouts_by_type(user_id, workout_type)

    def get_users(self) -> list[User]:
        return self.registry.get_users()

    def get_user(self, user_id: str) -> User | None:
        return self.registry.get_user(user_id)

    def update_user(self, user_id: str, patch: UserPatch) -> User:
        return self.registry.update_user(user_id, patch)

    def stop(self, *, timeout_s: float = 5.0) -> None:
        self._uvicorn.should_exit = True
        self._thread.join(timeout=timeout_s)


def _find_free_port(host: str) -> int:
    with contextlib.closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind((host, 0))
        return int(s.getsockname()[1])


def _normalize_base_url(url: str) -> str:
    url = url.strip()
    if not url:
        return ""
    # Allow passing just host:port.
    if "://" not in url:
        url = "http://" + url
    return url.rstrip("/")


def _is_server_alive(base_url: str, *, timeout_s: float = 0.2) -> bool:
    """Best-effort check whether a fittrack server is reachable."""

    import httpx

    try:
        with httpx.Client(base_url=base_url, timeout=timeout_s) as client:
            r = client.get("/healthz")
            if r.status_code != 200:
                return False
            data = r.json()
            return bool(data.get("ok"))
    except (httpx.HTTPError, ValueError):
        return False


def run(
    *,
    host: str = "127.0.0.1",
    port: int = 0,
    registry: FitnessRegistry | None = None,
    sample: bool | None = None,
    log_level: str = "info",
    access_log: bool = False,
    new_server: bool = False,
    connect_timeout_s: float = 0.2,
    startup_timeout_s: float = 10.0,
) -> FitTrackServer | FitTrackClient:
    """Start fittrack with a single Python call.

    Behavior:
    - If FITTRACK_URL is set, we *attach* to that existing server (client mode)
      unless `new_server=True`.
    - Otherwise, if `port != 0` and a server is already reachable at
      http://{host}:{port}, we attach to it unless `new_server=True`.
    - Otherwise we start a new server in a daemon thread and return a
      `FitTrackServer` once it accepts connections.
    """

    env_url = _normalize_base_url(os.getenv("FITTRACK_URL", ""))

    # 1) Try attaching to an explicitly provided server.
    if env_url and not new_server:
        if _is_server_alive(env_url, timeout_s=connect_timeout_s):
            logger.info("Attaching to fittrack server at %s", env_url)
            return FitTrackClient(env_url)

    # 2) Try attaching to host/port if they are explicitly chosen.
    if port != 0 and not new_server:
        default_url = _normalize_base_url(f"http://{host}:{port}")
        if _is_server_alive(default_url, timeout_s=connect_timeout_s):
            logger.info("Attaching to fittrack server at %s", default_url)
            return FitTrackClient(default_url)

    # 3) Start a fresh server.
    if port == 0:
        port = _find_free_port(host)

    if registry is None:
        app = create_app(sample=sample)
    else:
        app = create_app(registry)
    registry = app.state.registry

    config = uvicorn.Config(app, host=host, port=port, log_level=log_level, access_log=access_log)
    server = uvicorn.Server(config)

    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()

    deadline = time.monotonic() + startup_timeout_s
    while not server.started:
        if not thread.is_alive():
            raise RuntimeError(f"fittrack server failed to start on {host}:{port}")
        if time.monotonic() > deadline:
            server.should_exit = True
            raise RuntimeError(f"fittrack server did not start within {startup_timeout_s}s")
        time.sleep(0.01)

    url = f"http://{host}:{port}/"
    logger.info("fittrack server listening on %s", url)
    return FitTrackServer(host=host, port=port, url=url, registry=registry, _uvicorn=server, _thread=thread)
