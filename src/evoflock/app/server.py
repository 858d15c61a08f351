from __future__ import annotations

import asyncio
import json
import logging
from collections import deque
from dataclasses import asdict, dataclass
from typing import Dict, Set

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from ..sim.core.config import SimulationConfig
from ..sim.core.rng import DeterministicRng
from ..sim.core.simulation import Simulation
from ..sim.types.statistics import Statistics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueuedSnapshot:
    tick: int
    payload: str


class SimulationController:
    def __init__(self, config: SimulationConfig, broadcast_interval: int = 1, tick_interval: float = 1.0 / 60.0):
        self.config = config
        self.rng = DeterministicRng(config.seed)
        self.simulation = Simulation.random(self.rng, config)
        self.broadcast_interval = max(1, broadcast_interval)
        self.tick_interval = tick_interval
        self.running = False
        self.tick = 0
        self.last_stats: Statistics | None = None
        self.clients: Set[WebSocket] = set()
        self._client_last_sent: Dict[WebSocket, int] = {}
        self._snapshot_queue: deque[QueuedSnapshot] = deque()
        self._lock = asyncio.Lock()
        self._queue_lock = asyncio.Lock()
        self._step_task: asyncio.Task | None = None

    async def start(self) -> None:
        if self._step_task is None:
            self._step_task = asyncio.create_task(self._loop())
        self.running = True

    async def stop(self) -> None:
        self.running = False

    async def reset(self) -> None:
        async with self._lock:
            self.rng.reset()
            self.simulation = Simulation.random(self.rng, self.config)
            self.tick = 0
            self.last_stats = None
        async with self._queue_lock:
            self._snapshot_queue.clear()
        for client in self._client_last_sent:
            self._client_last_sent[client] = -1
        await self._broadcast_snapshot()

    async def step(self) -> Statistics | None:
        async with self._lock:
            stats = self.simulation.step(self.rng, self.config)
            self.tick += 1
            if stats is not None:
                self.last_stats = stats
        return stats

    async def train(self) -> Statistics:
        async with self._lock:
            # Ticks inside fast_forward are counted but not broadcast.
            remaining = self.config.max_generation + 1 - self.simulation.age
            stats = await asyncio.to_thread(self.simulation.fast_forward, self.rng, self.config)
            self.tick += remaining
            self.last_stats = stats
        await self._broadcast_snapshot()
        return stats

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)
            if not self.running:
                continue
            await self.step()
            if self.tick % self.broadcast_interval == 0:
                await self._broadcast_snapshot()

    async def acknowledge(self, tick: int) -> None:
        async with self._queue_lock:
            while self._snapshot_queue and self._snapshot_queue[0].tick <= tick:
                self._snapshot_queue.popleft()

    def _serialize_snapshot(self) -> QueuedSnapshot:
        payload = {
            "type": "snapshot",
            "tick": self.tick,
            "payload": {
                "tick": self.tick,
                "generation": self.simulation.generation,
                "world": asdict(self.simulation.world.snapshot()),
            },
        }
        return QueuedSnapshot(tick=self.tick, payload=json.dumps(payload))

    async def _send_pending_snapshots(self, client: WebSocket) -> None:
        last_sent = self._client_last_sent.get(client, -1)
        async with self._queue_lock:
            pending = [item for item in self._snapshot_queue if item.tick > last_sent]
        for item in pending:
            await client.send_text(item.payload)
            last_sent = item.tick
        self._client_last_sent[client] = last_sent

    async def _broadcast_snapshot(self) -> None:
        queued = self._serialize_snapshot()
        async with self._queue_lock:
            self._snapshot_queue.append(queued)
        stale: Set[WebSocket] = set()
        for client in self.clients:
            try:
                await self._send_pending_snapshots(client)
            except WebSocketDisconnect:
                stale.add(client)
        for client in stale:
            self.clients.discard(client)
            self._client_last_sent.pop(client, None)
            logger.info("dropped disconnected client")


def _stats_payload(stats: Statistics) -> dict:
    return {"statistics": asdict(stats), "summary": stats.summary()}


app = FastAPI(title="Evoflock Simulation")
controller = SimulationController(SimulationConfig())


@app.on_event("startup")
async def _startup() -> None:
    await controller.start()


@app.get("/api/world")
async def world() -> JSONResponse:
    return JSONResponse(asdict(controller.simulation.world.snapshot()))


@app.get("/api/status")
async def status() -> JSONResponse:
    last = controller.last_stats
    return JSONResponse(
        {
            "running": controller.running,
            "tick": controller.tick,
            "age": controller.simulation.age,
            "generation": controller.simulation.generation,
            "population": len(controller.simulation.world.animals),
            "last_statistics": asdict(last) if last is not None else None,
        }
    )


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


@app.post("/api/step")
async def step_simulation() -> JSONResponse:
    stats = await controller.step()
    payload = {"tick": controller.tick, "generation": controller.simulation.generation}
    if stats is not None:
        payload.update(_stats_payload(stats))
    return JSONResponse(payload)


@app.post("/api/train")
async def train_simulation() -> JSONResponse:
    stats = await controller.train()
    payload = {"generation": controller.simulation.generation}
    payload.update(_stats_payload(stats))
    return JSONResponse(payload)


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await websocket.accept()
    controller.clients.add(websocket)
    controller._client_last_sent[websocket] = -1
    logger.info("client connected (%d total)", len(controller.clients))
    await controller._send_pending_snapshots(websocket)
    try:
        while True:
            message = await websocket.receive_text()
            try:
                payload = json.loads(message)
            except json.JSONDecodeError:
                continue
            if payload.get("type") == "ack":
                tick = payload.get("tick")
                if isinstance(tick, int):
                    await controller.acknowledge(tick)
    except WebSocketDisconnect:
        controller.clients.discard(websocket)
        controller._client_last_sent.pop(websocket, None)
        logger.info("client disconnected (%d remaining)", len(controller.clients))


__all__ = ["app", "controller"]
