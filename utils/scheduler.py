"""
A virtual-clock scheduler with the same call_later/cancel surface as an asyncio
event loop. Used for headless simulation and for tests.
"""
import heapq
import itertools


class ManualHandle:
    """Handle for a callback scheduled on a ManualScheduler."""

    def __init__(self, when: float, callback, args):
        self.when = when
        self._callback = callback
        self._args = args
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled

    def _run(self):
        self._callback(*self._args)


class ManualScheduler:
    """Runs scheduled callbacks only when the clock is advanced."""

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._counter = itertools.count()

    def time(self) -> float:
        return self.now

    def call_later(self, delay: float, callback, *args) -> ManualHandle:
        handle = ManualHandle(self.now + max(0.0, delay), callback, args)
        heapq.heappush(self._queue, (handle.when, next(self._counter), handle))
        return handle

    @property
    def pending(self) -> int:
        """Number of scheduled callbacks that have not been cancelled."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled())

    def advance(self, seconds: float):
        """Moves the clock forward, firing every callback that comes due in order."""
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            self.now = when
            if not handle.cancelled():
                handle._run()
        self.now = target

    def run_until(self, predicate, step: float = 0.05, limit: float = 3600.0) -> bool:
        """Advances in small steps until predicate() holds or the limit passes."""
        elapsed = 0.0
        while not predicate():
            if elapsed >= limit:
                return False
            self.advance(step)
            elapsed += step
        return True
