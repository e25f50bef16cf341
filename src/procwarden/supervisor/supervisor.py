import time
import logging
import threading
from typing import Dict, List, Optional, Tuple
from procwarden.config import effective_settings as config
from procwarden.conditions import PollCondition
from procwarden.exceptions import ConfigurationError
from procwarden.supervisor.watch import Watch

log = logging.getLogger(__name__)

Trigger = Tuple[Watch, PollCondition, str]


class WatchSupervisor:
    """
    Polls the conditions of every registered watch.

    All conditions are tested from the thread running supervision_loop(), one
    after the other, so a condition never sees two test() calls at once.
    """

    def __init__(self, interval: Optional[float] = None) -> None:
        """Initializes the supervisor state."""
        self.interval: float = interval if interval is not None else config.POLL_INTERVAL
        self.watches: Dict[str, Watch] = {}
        self.last_pids: Dict[str, int] = {}
        self.next_poll_at: Dict[int, float] = {}
        self.shutdown_signal_received = threading.Event()

    def register(self, watch: Watch) -> None:
        """
        Validates and prepares every condition of a watch, then starts supervising it.

        :param watch: The watch to supervise.
        :raises ConfigurationError: If the watch is already registered or any condition is invalid.
        """
        if watch.name in self.watches:
            raise ConfigurationError(f"A watch named '{watch.name}' is already registered")

        problems: List[str] = []
        for condition in watch.conditions:
            try:
                condition.validate()
            except ConfigurationError as e:
                problems.extend(f"{condition.friendly_name}: {problem}" for problem in e.problems)
        if problems:
            raise ConfigurationError(f"Watch '{watch.name}' has invalid conditions", problems)

        for condition in watch.conditions:
            condition.prepare()

        self.watches[watch.name] = watch
        pid = watch.pid()
        if pid is not None:
            self.last_pids[watch.name] = pid
        log.info(f"Supervising watch '{watch.name}' with {len(watch.conditions)} condition(s).")

    def poll_once(self, now: Optional[float] = None) -> List[Trigger]:
        """
        Tests every due condition once.

        A triggered condition is handed to its watch's trigger handler and its
        history is cleared, so the same samples cannot trigger it again.

        :param now: Monotonic timestamp of this poll; defaults to the current time.
        :return: The (watch, condition, message) of every condition that triggered.
        """
        now = time.monotonic() if now is None else now
        triggers: List[Trigger] = []

        for watch in list(self.watches.values()):
            self._reset_on_restart(watch)
            for condition in watch.conditions:
                if not self._is_due(condition, now):
                    continue
                try:
                    triggered, message = condition.test()
                except Exception as e:
                    log.error(f"Condition {condition.friendly_name} failed: {e}", exc_info=True, extra={"watch": watch.name})
                    continue

                if not triggered:
                    log.debug(message, extra={"watch": watch.name})
                    continue

                triggers.append((watch, condition, message))
                try:
                    watch.on_trigger(watch, condition, message)
                except Exception as e:
                    log.error(f"Trigger handler of watch '{watch.name}' failed: {e}", exc_info=True)
                condition.reset()

        return triggers

    def _reset_on_restart(self, watch: Watch) -> None:
        """Clears condition history when the watched process has a new pid."""
        pid = watch.pid()
        if pid is None:
            return
        previous = self.last_pids.get(watch.name)
        if previous is not None and previous != pid:
            log.info(f"Process changed from PID {previous} to {pid}. Resetting condition history.", extra={"watch": watch.name})
            for condition in watch.conditions:
                condition.reset()
        self.last_pids[watch.name] = pid

    def _is_due(self, condition: PollCondition, now: float) -> bool:
        if condition.interval is None:
            return True
        key = id(condition)
        if now < self.next_poll_at.get(key, now):
            return False
        self.next_poll_at[key] = now + condition.interval
        return True

    def tick_interval(self) -> float:
        """The loop sleeps for the shortest of the supervisor and condition intervals."""
        intervals = [self.interval]
        intervals.extend(
            condition.interval
            for watch in self.watches.values()
            for condition in watch.conditions
            if condition.interval is not None
        )
        return max(min(intervals), 0.1)

    def supervision_loop(self) -> None:
        """Main supervisor loop. Runs until stop() is called."""
        log.info(f"Supervisor started. Polling {len(self.watches)} watch(es) every {self.tick_interval():g}s.")
        self.shutdown_signal_received.clear()

        while not self.shutdown_signal_received.is_set():
            try:
                self.poll_once()
                self.shutdown_signal_received.wait(self.tick_interval())
            except KeyboardInterrupt:
                log.info("Supervisor loop interrupted by user.")
                break
            except Exception as e:
                log.critical(f"Critical error in supervisor loop: {e}", exc_info=True)
                return
        log.info("Supervisor stopped.")

    def stop(self) -> None:
        self.shutdown_signal_received.set()
