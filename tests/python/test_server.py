import asyncio
import dataclasses
import json

from evoflock.app.server import SimulationController


def test_snapshot_queue_ack_cleanup(small_config) -> None:
    controller = SimulationController(small_config)

    async def exercise() -> None:
        controller.tick = 1
        await controller._broadcast_snapshot()
        controller.tick = 2
        await controller._broadcast_snapshot()
        async with controller._queue_lock:
            queued_ticks = [item.tick for item in controller._snapshot_queue]
        assert queued_ticks == [1, 2]
        await controller.acknowledge(1)
        async with controller._queue_lock:
            remaining_ticks = [item.tick for item in controller._snapshot_queue]
        assert remaining_ticks == [2]

    asyncio.run(exercise())


def test_snapshot_payload_lists_world(small_config) -> None:
    controller = SimulationController(small_config)

    payload = json.loads(controller._serialize_snapshot().payload)

    assert payload["type"] == "snapshot"
    world = payload["payload"]["world"]
    assert len(world["animals"]) == small_config.world.num_animals
    assert len(world["foods"]) == small_config.world.num_foods
    assert set(world["animals"][0]) == {"x", "y", "rotation", "speed", "hunger"}


def test_step_and_train_advance_simulation(small_config) -> None:
    controller = SimulationController(small_config)

    async def exercise() -> None:
        assert await controller.step() is None
        assert controller.tick == 1
        stats = await controller.train()
        assert controller.simulation.generation == 1
        assert controller.last_stats is stats
        assert stats.summary().startswith("Fitness : min ")

    asyncio.run(exercise())


def test_reset_replays_the_same_world(small_config) -> None:
    controller = SimulationController(small_config)
    initial = controller.simulation.world.snapshot()

    async def exercise() -> None:
        await controller.train()
        await controller.reset()

    asyncio.run(exercise())

    assert controller.tick == 0
    assert controller.simulation.generation == 0
    assert controller.simulation.world.snapshot() == initial


class _RecordingClient:
    def __init__(self) -> None:
        self.sent = []

    async def send_text(self, text: str) -> None:
        self.sent.append(json.loads(text))


def test_train_broadcasts_post_generation_world(small_config) -> None:
    controller = SimulationController(small_config)
    client = _RecordingClient()
    controller.clients.add(client)

    async def exercise() -> None:
        await controller.step()
        await controller._broadcast_snapshot()
        await controller.train()

    asyncio.run(exercise())

    # one step, then the remaining max_generation ticks of the generation
    assert controller.tick == small_config.max_generation + 1
    assert [message["tick"] for message in client.sent] == [1, controller.tick]
    assert client.sent[-1]["payload"]["generation"] == 1


def test_train_keeps_event_loop_responsive(small_config) -> None:
    config = dataclasses.replace(small_config, max_generation=1500)
    controller = SimulationController(config)
    beats = []

    async def heartbeat() -> None:
        while True:
            await asyncio.sleep(0.001)
            beats.append(1)

    async def exercise() -> int:
        task = asyncio.create_task(heartbeat())
        await asyncio.sleep(0)
        before = len(beats)
        await controller.train()
        during = len(beats) - before
        task.cancel()
        return during

    assert asyncio.run(exercise()) > 0
    assert controller.simulation.generation == 1
