"""
Concurrent traceroute runner.

Launches one probe per target on its own worker thread, waits for every
one of them, and returns the outcomes in target order.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from datetime import datetime
from typing import Callable, Iterator, Sequence

from connectioncheck.config import DEFAULT_PROBE_TIMEOUT
from connectioncheck.logging_config import get_logger
from connectioncheck.trace.core import ProbeKind, ProbeOutcome, run_probe

logger = get_logger(__name__)

ProbeFunc = Callable[..., ProbeOutcome]
ProgressCallback = Callable[[int, int, ProbeOutcome], None]


class ResultSetError(Exception):
    """A result slot was written twice or out of range."""


class IncompleteResultSetError(ResultSetError):
    """The result set was read before every slot was filled."""


class ResultSet:
    """Fixed-size, index-addressed collection of probe outcomes.

    Every slot is written exactly once; reads are refused until all slots
    are populated.
    """

    def __init__(self, targets: Sequence[str]):
        self.targets = tuple(targets)
        self._slots: list[ProbeOutcome | None] = [None] * len(self.targets)

    def __len__(self) -> int:
        return len(self._slots)

    def set(self, index: int, outcome: ProbeOutcome) -> None:
        if not 0 <= index < len(self._slots):
            raise ResultSetError(f"Slot {index} out of range for {len(self._slots)} targets")
        if self._slots[index] is not None:
            raise ResultSetError(f"Slot {index} ({self.targets[index]}) already populated")
        self._slots[index] = outcome

    @property
    def is_complete(self) -> bool:
        return all(slot is not None for slot in self._slots)

    def pending(self) -> list[str]:
        """Targets whose slot is still empty."""
        return [t for t, slot in zip(self.targets, self._slots) if slot is None]

    def outcomes(self) -> list[ProbeOutcome]:
        if not self.is_complete:
            raise IncompleteResultSetError(
                f"{len(self.pending())} of {len(self)} probes have not finished"
            )
        return list(self._slots)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[ProbeOutcome]:
        return iter(self.outcomes())

    def __getitem__(self, index: int) -> ProbeOutcome:
        return self.outcomes()[index]


class CompletionCounter:
    """Thread-safe count of finished probes."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def increment(self) -> int:
        """Add one and return the new value, read under the same lock."""
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


def run_concurrent_probes(
    targets: Sequence[str],
    timeout: float = DEFAULT_PROBE_TIMEOUT,
    probe: ProbeFunc = run_probe,
    on_progress: ProgressCallback | None = None,
    counter: CompletionCounter | None = None,
) -> ResultSet:
    """Probe every target in parallel and block until all have finished.

    Args:
        targets: Hostnames in report order
        timeout: Per-probe timeout in seconds
        probe: Callable taking (host, timeout, index=...) and returning a ProbeOutcome
        on_progress: Called once per finished probe with (completed, total, outcome)
        counter: Optional completion counter, exposed for inspection

    Returns:
        A complete ResultSet in the same order as targets
    """
    results = ResultSet(targets)
    total = len(results)
    counter = counter or CompletionCounter()

    if total == 0:
        return results

    def task(index: int, host: str) -> None:
        try:
            outcome = probe(host, timeout, index=index)
        except Exception as e:
            logger.exception("Probe for %s raised unexpectedly", host)
            now = datetime.now().astimezone()
            outcome = ProbeOutcome(
                target=host,
                index=index,
                started_at=now,
                finished_at=now,
                kind=ProbeKind.ERROR,
                error=f"command execution failed: {e}",
            )

        results.set(index, outcome)
        completed = counter.increment()

        if on_progress is not None:
            try:
                on_progress(completed, total, outcome)
            except Exception:
                logger.exception("Progress callback failed for %s", host)

    logger.info("Starting %d traceroutes (timeout %ss each)", total, timeout)
    start = time.monotonic()

    with ThreadPoolExecutor(max_workers=total, thread_name_prefix="probe") as executor:
        futures = [
            executor.submit(task, index, host)
            for index, host in enumerate(results.targets)
        ]
        wait(futures)

    # Surface errors from slot bookkeeping
    for future in futures:
        future.result()

    logger.info(
        "All %d traceroutes finished in %.1fs",
        counter.value, time.monotonic() - start,
    )

    return results
