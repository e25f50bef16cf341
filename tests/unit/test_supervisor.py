"""Unit tests for WatchSupervisor."""

import logging
import threading
from unittest.mock import Mock

import pytest
from procwarden.conditions import CpuUsage
from procwarden.exceptions import ConfigurationError
from procwarden.supervisor import Watch, WatchSupervisor


def _watched(stub_sampler, pid=100, on_trigger=None, **attrs):
    watch = Watch("web", pid=pid, on_trigger=on_trigger or Mock())
    condition = CpuUsage(stub_sampler)
    for key, value in {"above": 25, **attrs}.items():
        setattr(condition, key, value)
    watch.attach(condition)
    return watch, condition


class TestRegister:
    """Tests for register()."""

    def test_validates_and_prepares(self, stub_sampler):
        watch, condition = _watched(stub_sampler, times=(2, 3))
        supervisor = WatchSupervisor(interval=1)

        supervisor.register(watch)

        assert supervisor.watches == {"web": watch}
        assert condition.timeline.capacity == 3
        assert supervisor.last_pids == {"web": 100}

    def test_rejects_invalid_conditions(self, stub_sampler):
        watch, condition = _watched(stub_sampler)
        condition.above = None
        supervisor = WatchSupervisor(interval=1)

        with pytest.raises(ConfigurationError) as exc_info:
            supervisor.register(watch)

        assert exc_info.value.problems == ["web [CpuUsage]: Attribute 'above' must be specified"]
        assert supervisor.watches == {}
        assert condition.timeline is None

    @pytest.mark.parametrize("attrs", [{"interval": "5"}, {"interval": 0}, {"above": "25%"}])
    def test_rejects_mistyped_values_before_polling(self, stub_sampler, attrs):
        watch, _ = _watched(stub_sampler, **attrs)
        supervisor = WatchSupervisor(interval=1)

        with pytest.raises(ConfigurationError, match="invalid conditions"):
            supervisor.register(watch)

        assert supervisor.watches == {}
        assert supervisor.tick_interval() == 1
        assert supervisor.poll_once(now=0.0) == []
        assert stub_sampler.sampled_pids == []

    def test_rejects_duplicate_names(self, stub_sampler):
        supervisor = WatchSupervisor(interval=1)
        supervisor.register(Watch("web", pid=1))

        with pytest.raises(ConfigurationError, match="already registered"):
            supervisor.register(Watch("web", pid=2))


class TestPollOnce:
    """Tests for poll_once()."""

    def test_within_bounds_reports_nothing(self, stub_sampler):
        watch, _ = _watched(stub_sampler)
        supervisor = WatchSupervisor(interval=1)
        supervisor.register(watch)
        stub_sampler.queue(10)

        assert supervisor.poll_once() == []
        watch.on_trigger.assert_not_called()

    def test_trigger_calls_handler_and_resets_history(self, stub_sampler):
        watch, condition = _watched(stub_sampler, times=(2, 3))
        supervisor = WatchSupervisor(interval=1)
        supervisor.register(watch)
        stub_sampler.queue(30, 40)

        supervisor.poll_once()
        triggers = supervisor.poll_once()

        assert triggers == [(watch, condition, "cpu out of bounds [*30%, *40%]")]
        watch.on_trigger.assert_called_once_with(watch, condition, "cpu out of bounds [*30%, *40%]")
        assert len(condition.timeline) == 0

    def test_pid_change_resets_history(self, stub_sampler):
        watch, condition = _watched(stub_sampler, times=(2, 3))
        supervisor = WatchSupervisor(interval=1)
        supervisor.register(watch)
        stub_sampler.queue(30, 40)

        supervisor.poll_once()
        watch.set_pid(200)
        triggers = supervisor.poll_once()

        assert triggers == []
        assert condition.timeline.to_sequence() == (40,)
        assert stub_sampler.sampled_pids == [100, 200]
        assert supervisor.last_pids["web"] == 200

    def test_failing_handler_does_not_stop_polling(self, stub_sampler):
        handler = Mock(side_effect=RuntimeError("boom"))
        watch, condition = _watched(stub_sampler, on_trigger=handler)
        supervisor = WatchSupervisor(interval=1)
        supervisor.register(watch)
        stub_sampler.queue(90)

        triggers = supervisor.poll_once()

        assert len(triggers) == 1
        assert len(condition.timeline) == 0

    def test_failing_condition_is_logged_and_skipped(self, stub_sampler, caplog):
        watch, condition = _watched(stub_sampler)
        other = CpuUsage(stub_sampler)
        other.above = 25
        watch.attach(other)
        supervisor = WatchSupervisor(interval=1)
        supervisor.register(watch)
        condition.test = Mock(side_effect=RuntimeError("sampler exploded"))
        stub_sampler.queue(90)

        with caplog.at_level(logging.ERROR):
            triggers = supervisor.poll_once()

        assert "sampler exploded" in caplog.text
        assert [c for _, c, _ in triggers] == [other]

    def test_condition_interval_is_respected(self, stub_sampler):
        watch, condition = _watched(stub_sampler, interval=10)
        supervisor = WatchSupervisor(interval=1)
        supervisor.register(watch)
        stub_sampler.queue(1, 2)

        supervisor.poll_once(now=100.0)
        supervisor.poll_once(now=105.0)
        supervisor.poll_once(now=110.0)

        assert condition.timeline.to_sequence() == (2,)
        assert len(stub_sampler.sampled_pids) == 2


class TestLoop:
    """Tests for the supervision loop."""

    def test_tick_interval_uses_shortest(self, stub_sampler):
        watch, _ = _watched(stub_sampler, interval=2)
        supervisor = WatchSupervisor(interval=5)
        supervisor.register(watch)

        assert supervisor.tick_interval() == 2

    def test_interval_defaults_to_settings(self):
        from procwarden.config import effective_settings

        assert WatchSupervisor().interval == effective_settings.POLL_INTERVAL

    def test_stop_ends_the_loop(self):
        supervisor = WatchSupervisor(interval=0.1)
        supervisor.poll_once = Mock(side_effect=lambda: supervisor.stop())

        thread = threading.Thread(target=supervisor.supervision_loop)
        thread.start()
        thread.join(timeout=5)

        assert not thread.is_alive()
        supervisor.poll_once.assert_called_once()

    def test_keyboard_interrupt_ends_the_loop(self):
        supervisor = WatchSupervisor(interval=0.1)
        supervisor.poll_once = Mock(side_effect=KeyboardInterrupt)

        supervisor.supervision_loop()

        supervisor.poll_once.assert_called_once()
