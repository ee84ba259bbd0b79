import asyncio

from booking_client.booking.timer import CountdownTimer

from conftest import FakeClock


class TestManualTicks:
    def test_expires_once(self):
        fired = []
        timer = CountdownTimer(seconds=3, on_expire=lambda: fired.append(1))
        timer.start()
        for _ in range(10):
            timer.tick()
        assert timer.expired
        assert timer.remaining == 0
        assert fired == [1]

    def test_ticks_before_start_are_ignored(self):
        timer = CountdownTimer(seconds=3)
        timer.tick()
        assert timer.remaining == 3

    def test_reset(self):
        timer = CountdownTimer(seconds=3)
        timer.start()
        timer.tick()
        timer.reset()
        assert (timer.remaining, timer.active, timer.expired) == (3, False, False)

    def test_suspend_resume_uses_whole_elapsed_seconds(self):
        clock = FakeClock()
        timer = CountdownTimer(seconds=10, clock=clock)
        timer.start()
        timer.suspend()
        clock.advance(4.9)
        timer.resume()
        assert timer.remaining == 6
        assert timer.active

    def test_short_background_cycles_add_up(self):
        # Given: a running hold
        clock = FakeClock()
        timer = CountdownTimer(seconds=300, clock=clock)
        timer.start()
        # When: ten sub-second suspend/resume cycles
        for _ in range(10):
            timer.suspend()
            clock.advance(0.9)
            timer.resume()
        # Then: the 9 seconds away are charged
        assert timer.remaining == 291

    def test_partial_second_before_suspend_counts(self):
        clock = FakeClock()
        timer = CountdownTimer(seconds=300, clock=clock)
        timer.start()
        for _ in range(5):
            clock.advance(0.6)
            timer.suspend()
            clock.advance(0.4)
            timer.resume()
        assert timer.remaining == 295


class TestIntervalTask:
    def test_runs_to_zero(self):
        fired = []

        async def scenario():
            timer = CountdownTimer(seconds=2, on_expire=lambda: fired.append(1), interval=0.01)
            timer.start()
            assert timer.running
            await asyncio.sleep(0.1)
            return timer

        timer = asyncio.run(scenario())
        assert fired == [1]
        assert not timer.running

    def test_stop_cancels_task(self):
        async def scenario():
            timer = CountdownTimer(seconds=100, interval=0.01)
            timer.start()
            task = timer._task
            timer.stop()
            await asyncio.sleep(0.03)
            return timer, task

        timer, task = asyncio.run(scenario())
        assert task.cancelled()
        assert timer.remaining == 100
