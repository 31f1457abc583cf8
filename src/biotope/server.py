from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import AsyncIterator, Optional, Set

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse, Response

from .config import SimulationConfig
from .location import Location
from .metrics import CycleMetrics
from .world import World, location_to_xml

logger = logging.getLogger(__name__)


class SimulationController:
    def __init__(self, config: SimulationConfig, location: Optional[Location] = None):
        self.config = config
        self.world = World(config, location)
        self.broadcast_interval = max(1, config.broadcast_interval)
        self.running = False
        self.tick = 0
        self.speed_multiplier = 1.0
        self.clients: Set[WebSocket] = set()
        self._lock = asyncio.Lock()
        self._loop_task: asyncio.Task | None = None

    async def start(self) -> None:
        if self._loop_task is None:
            self._loop_task = asyncio.create_task(self._loop())
        self.running = True

    async def stop(self) -> None:
        self.running = False

    async def shutdown(self) -> None:
        self.running = False
        if self._loop_task is not None:
            self._loop_task.cancel()
            try:
                await self._loop_task
            except asyncio.CancelledError:
                pass
            self._loop_task = None

    async def reset(self) -> None:
        async with self._lock:
            self.world.reset()
            self.tick = 0
        await self._broadcast_snapshot()

    async def step(self) -> CycleMetrics:
        async with self._lock:
            metrics = self.world.step(self.tick)
            self.tick += 1
        if self.tick % self.broadcast_interval == 0:
            await self._broadcast_snapshot()
        return metrics

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.tick_interval / self.speed_multiplier)
            if not self.running:
                continue
            await self.step()

    def snapshot_payload(self) -> dict:
        snapshot = self.world.snapshot(self.tick)
        return {
            "tick": snapshot.tick,
            "seed": snapshot.seed,
            "metrics": asdict(snapshot.metrics),
            "sources": snapshot.sources,
            "individuals": snapshot.individuals,
        }

    async def _broadcast_snapshot(self) -> None:
        if not self.clients:
            return
        payload = json.dumps(self.snapshot_payload())
        stale: Set[WebSocket] = set()
        for client in self.clients:
            try:
                await client.send_text(payload)
            except WebSocketDisconnect:
                stale.add(client)
        for client in stale:
            logger.debug("Dropping disconnected client")
            self.clients.discard(client)


def create_app(controller: SimulationController, autostart: bool = True) -> FastAPI:
    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if autostart:
            await controller.start()
        yield
        await controller.shutdown()

    app = FastAPI(title="Biotope Simulation", lifespan=lifespan)
    app.state.controller = controller

    @app.get("/api/status")
    async def status() -> JSONResponse:
        snapshot = controller.world.snapshot(controller.tick)
        return JSONResponse(
            {
                "running": controller.running,
                "tick": controller.tick,
                "population": len(controller.world.location.individuals),
                "metrics": asdict(snapshot.metrics),
            }
        )

    @app.get("/api/snapshot")
    async def snapshot() -> JSONResponse:
        return JSONResponse(controller.snapshot_payload())

    @app.get("/api/location")
    async def location() -> Response:
        async with controller._lock:
            body = location_to_xml(controller.world.location)
        return Response(content=body, media_type="application/xml")

    @app.post("/api/control/start")
    async def start_simulation() -> JSONResponse:
        controller.running = True
        return JSONResponse({"running": True})

    @app.post("/api/control/stop")
    async def stop_simulation() -> JSONResponse:
        controller.running = False
        return JSONResponse({"running": False})

    @app.post("/api/control/reset")
    async def reset_simulation() -> JSONResponse:
        await controller.reset()
        return JSONResponse({"running": controller.running, "tick": controller.tick})

    @app.post("/api/control/step")
    async def step_simulation() -> JSONResponse:
        metrics = await controller.step()
        return JSONResponse({"tick": controller.tick, "metrics": asdict(metrics)})

    @app.post("/api/control/speed")
    async def set_speed(payload: dict) -> JSONResponse:
        speed = float(payload.get("multiplier", 1.0))
        controller.speed_multiplier = max(0.1, min(5.0, speed))
        return JSONResponse({"multiplier": controller.speed_multiplier})

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await websocket.accept()
        controller.clients.add(websocket)
        await controller._broadcast_snapshot()
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            controller.clients.discard(websocket)

    return app


controller = SimulationController(SimulationConfig())
app = create_app(controller)

__all__ = ["app", "controller", "create_app", "SimulationController"]
