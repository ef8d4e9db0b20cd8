import asyncio

from conftest import FakeCamera, FakeClient
from sos_scanner.bus.bus import CONFIRMED_TOPIC
from sos_scanner.config import ScannerConfig
from sos_scanner.errors import DeviceError
from sos_scanner.schemas import Detection, DetectionResult, SessionPhase
from sos_scanner.service import ScannerService

CONFIG = ScannerConfig(capture_interval_s=60)


def _service(client=None, opener=None):
    camera = FakeCamera()
    service = ScannerService(
        config=CONFIG,
        client=client or FakeClient(DetectionResult(detections=(Detection("mask", 0.9),))),
        open_device=opener or (lambda request: camera),
    )
    return service, camera


def test_full_item_cycle_and_notification():
    service, camera = _service()
    confirmed = []
    service.bus.subscribe(CONFIRMED_TOPIC, confirmed.append)

    async def scenario():
        await service.start_session()
        await service.scheduler.trigger()
        assert service.state.phase is SessionPhase.REVIEWING
        assert service.confirm("mask")
        assert service.new_item()
        state = service.state
        await service.end_session()
        return state

    state = asyncio.run(scenario())
    assert confirmed == [{"label": "mask"}]
    assert state.phase is SessionPhase.CAPTURING
    assert state.confirmed_label is None
    assert state.candidates == ()
    assert camera.release_count == 1


def test_start_twice_keeps_one_session():
    service, camera = _service()

    async def scenario():
        await service.start_session()
        scheduler = service.scheduler
        await service.start_session()
        same = service.scheduler is scheduler
        await service.end_session()
        return same

    assert asyncio.run(scenario())
    assert camera.release_count == 1


def test_restart_after_device_failure():
    attempts = []
    camera = FakeCamera()

    def opener(request):
        attempts.append(request)
        if len(attempts) == 1:
            raise DeviceError("camera busy")
        return camera

    service, _ = _service(opener=opener)

    async def scenario():
        failed = await service.start_session()
        running_after_failure = service.running
        recovered = await service.start_session()
        await service.end_session()
        return failed, running_after_failure, recovered

    failed, running_after_failure, recovered = asyncio.run(scenario())
    assert failed.status == "Camera error: camera busy"
    assert not running_after_failure
    assert recovered.phase is SessionPhase.CAPTURING
    assert attempts[0].facing_mode == "environment"


def test_end_session_then_start_gives_fresh_state():
    service, _ = _service()

    async def scenario():
        await service.start_session()
        await service.scheduler.trigger()
        ended = await service.end_session()
        restarted = await service.start_session()
        await service.aclose()
        return ended, restarted

    ended, restarted = asyncio.run(scenario())
    assert ended.closed
    assert not restarted.closed
    assert restarted.candidates == ()
    assert service.client.closed
