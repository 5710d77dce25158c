from bucketflow.controller.driver import SimulationDriver
from bucketflow.controller.loop import FrameLoop
from bucketflow.model.state import SimulationStatus


def test_frame_loop_advances_driver(qtbot, default_params):
    driver = SimulationDriver(default_params)
    loop = FrameLoop(driver, interval_ms=5)

    loop.start()
    assert loop.is_active
    assert driver.status == SimulationStatus.RUNNING

    qtbot.waitUntil(lambda: driver.state.time > 0.1, timeout=5000)
    assert loop.frames > 0

    loop.pause()
    assert not loop.is_active
    assert driver.status == SimulationStatus.PAUSED


def test_frame_loop_publishes_through_signal(qtbot, spill_params):
    driver = SimulationDriver(spill_params)
    loop = FrameLoop(driver, interval_ms=5)
    loop.start()

    with qtbot.waitSignal(driver.state_published, timeout=5000) as blocker:
        pass

    loop.pause()
    assert blocker.args[0].height == 0.4


def test_frame_loop_reset(qtbot, default_params):
    driver = SimulationDriver(default_params)
    loop = FrameLoop(driver, interval_ms=5)
    loop.start()
    qtbot.waitUntil(lambda: driver.step_count > 0, timeout=5000)

    loop.reset()

    assert not loop.is_active
    assert loop.frames == 0
    assert driver.status == SimulationStatus.IDLE
    assert driver.step_count == 0
