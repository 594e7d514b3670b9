"""FastAPI server that runs the simulation and streams frames.

Provides:
- WebSocket /ws/frames: stream Frame objects at ~30 FPS
- REST API for the latest frame, the link set, freeze and reset
"""

from __future__ import annotations

import asyncio
import logging
import threading
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, Field

from linkfield import __version__
from linkfield.config import SimulationConfig, get_simulation_config
from linkfield.engine.simulation import Simulation, create_simulation, tick_simulation
from linkfield.projection.projector import Frame, empty_frame_dict, frame_to_dict, project

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

TICK_RATE = 60.0  # ticks per second for the background loop
STREAM_FPS = 30.0


class SimulationState:
    """Thread-safe owner of one running simulation.

    The background thread is the only caller of ``tick``; request handlers
    read the latest projected frame or flip the freeze flag under the lock.
    """

    def __init__(self, config: SimulationConfig | None = None) -> None:
        self._config = config or get_simulation_config()
        self._sim = create_simulation(self._config)
        self._lock = threading.Lock()
        self._latest_frame: Frame | None = None
        self._running = False
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def simulation(self) -> Simulation:
        with self._lock:
            return self._sim

    @property
    def frozen(self) -> bool:
        with self._lock:
            return self._sim.frozen

    @property
    def latest_frame(self) -> Frame | None:
        with self._lock:
            return self._latest_frame

    @property
    def running(self) -> bool:
        """Whether the background tick thread is active."""
        return self._running

    def summary(self) -> dict[str, Any]:
        """Tick counter, freeze flag and sizes, all read under one lock."""
        with self._lock:
            return {
                "tick": self._sim.tick,
                "frozen": self._sim.frozen,
                "particle_count": len(self._sim.particle_field),
                "link_count": len(self._sim.registry),
            }

    def tick(self) -> Frame:
        """Run one tick and publish its frame."""
        with self._lock:
            result = tick_simulation(self._sim)
            self._latest_frame = project(self._sim, result)
            return self._latest_frame

    def toggle_freeze(self) -> bool:
        """Freeze or resume the simulation. Returns the new frozen state."""
        with self._lock:
            return self._sim.toggle_freeze()

    def reset(self) -> None:
        """Start over with a freshly populated field."""
        with self._lock:
            self._sim = create_simulation(self._config)
            self._latest_frame = None
        logger.info("Simulation reset")

    def start(self) -> None:
        """Start the background tick thread."""
        if self._running:
            return
        self._running = True
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._simulation_loop, daemon=True)
        self._thread.start()
        logger.info("Simulation thread started")

    def stop(self) -> None:
        """Stop the background tick thread."""
        if not self._running:
            return
        self._running = False
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
        logger.info("Simulation thread stopped")

    def _simulation_loop(self) -> None:
        interval = 1.0 / TICK_RATE
        while self._running and not self._stop_event.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("Tick failed, stopping simulation thread")
                self._running = False
                return
            self._stop_event.wait(timeout=interval)


_sim_state: SimulationState | None = None


def get_sim_state() -> SimulationState:
    """Get or create the global simulation state."""
    global _sim_state
    if _sim_state is None:
        _sim_state = SimulationState()
    return _sim_state


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Start the tick thread with the app and stop it on shutdown."""
    sim = get_sim_state()
    sim.start()
    yield
    sim.stop()


app = FastAPI(
    title="linkfield",
    description="Wandering particles joined by a Delaunay proximity graph with stable link ages",
    version=__version__,
    lifespan=lifespan,
)


class LinkResponse(BaseModel):
    """A tracked link."""

    a: int = Field(description="Lower particle index")
    b: int = Field(description="Higher particle index")
    since: float = Field(description="Clock time the link formed")
    age: float = Field(description="Seconds since the link formed")


class StateResponse(BaseModel):
    """Summary of the running simulation."""

    tick: int = Field(description="Ticks run so far")
    frozen: bool = Field(description="Whether ticking is frozen")
    particle_count: int = Field(description="Number of particles")
    link_count: int = Field(description="Number of tracked links")


class ControlCommandResponse(BaseModel):
    """Response for control commands."""

    success: bool = Field(description="Whether command succeeded")
    message: str = Field(description="Status message")


@app.get("/api/state", response_model=StateResponse, tags=["simulation"])
async def get_state() -> StateResponse:
    """Tick counter, freeze flag and sizes."""
    return StateResponse(**get_sim_state().summary())


@app.get("/api/frame", tags=["simulation"])
async def get_frame() -> dict[str, Any]:
    """Latest projected frame, or an empty placeholder before the first tick."""
    frame = get_sim_state().latest_frame
    if frame is None:
        return empty_frame_dict()
    return frame_to_dict(frame)


@app.get("/api/links", response_model=list[LinkResponse], tags=["simulation"])
async def get_links() -> list[LinkResponse]:
    """Links of the latest frame with their ages."""
    frame = get_sim_state().latest_frame
    if frame is None:
        return []
    return [LinkResponse(a=l.a, b=l.b, since=l.since, age=l.age) for l in frame.links]  # noqa: E741


@app.post("/api/freeze", response_model=ControlCommandResponse, tags=["simulation"])
async def toggle_freeze() -> ControlCommandResponse:
    """Toggle the freeze flag."""
    frozen = get_sim_state().toggle_freeze()
    return ControlCommandResponse(
        success=True,
        message="Simulation frozen" if frozen else "Simulation resumed",
    )


@app.post("/api/reset", response_model=ControlCommandResponse, tags=["simulation"])
async def reset_simulation() -> ControlCommandResponse:
    """Repopulate the field and forget all links."""
    get_sim_state().reset()
    return ControlCommandResponse(success=True, message="Simulation reset")


@app.websocket("/ws/frames")
async def websocket_frames(websocket: WebSocket) -> None:
    """Stream the latest frame at ~30 FPS.

    Sends an empty placeholder frame (tick -1) until the first tick exists.
    """
    await websocket.accept()
    logger.info("Frame client connected")
    sim = get_sim_state()
    interval = 1.0 / STREAM_FPS

    try:
        while True:
            start = asyncio.get_running_loop().time()

            frame = sim.latest_frame
            await websocket.send_json(frame_to_dict(frame) if frame is not None else empty_frame_dict())

            elapsed = asyncio.get_running_loop().time() - start
            await asyncio.sleep(max(0.0, interval - elapsed))

    except WebSocketDisconnect:
        logger.info("Frame client disconnected")


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
