"""
Polling of submitted calls until they reach a terminal status.
"""
import logging
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Sequence

from .exceptions import PollCancelledError, PollError, PollTimeoutError, SmartWalletError
from .models import CallStatus, CallStatusCode
from .relayer._rate_limited_log import rate_limited_log

logger = logging.getLogger(__name__)


class StatusPoller:
    """
    Repeatedly queries a call id until it succeeds or fails.

    ``100`` (pending) waits ``interval`` seconds and queries again, ``200``
    returns the status, anything else raises PollError carrying the code.
    The loop is bounded by an optional deadline and can be cancelled through
    a ``threading.Event``. All loop state is local to a single ``poll`` call,
    so one poller may serve concurrent polls of different call ids.
    """

    def __init__(
        self,
        fetch_status: Callable[[str], CallStatus],
        interval: float = 1.0,
        timeout: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Args:
            fetch_status: Returns the current CallStatus of a call id
            interval: Seconds to wait between queries while pending
            timeout: Default deadline in seconds, None to poll until terminal
            logger: Optional logger instance
            clock: Monotonic clock used for the deadline
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.fetch_status = fetch_status
        self.interval = interval
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self._clock = clock

    def poll(
        self,
        call_id: str,
        cancel_event: Optional[threading.Event] = None,
        timeout: Optional[float] = None
    ) -> CallStatus:
        """
        Poll a call id until it reaches a terminal status.

        Args:
            call_id: Tracking identifier returned on submission
            cancel_event: Set it from another thread to stop polling
            timeout: Deadline for this poll, overriding the poller default

        Returns:
            The successful CallStatus, including receipts

        Raises:
            PollError: Terminal failure status, or the status could not be fetched
            PollTimeoutError: The deadline passed while still pending
            PollCancelledError: ``cancel_event`` was set
        """
        cancel_event = cancel_event or threading.Event()
        timeout = self.timeout if timeout is None else timeout
        deadline = None if timeout is None else self._clock() + timeout
        attempts = 0

        self.logger.info(f"Polling call status for {call_id}...")
        while True:
            if cancel_event.is_set():
                raise PollCancelledError(f"Polling of {call_id} cancelled after {attempts} queries")

            attempts += 1
            try:
                status = self.fetch_status(call_id)
            except PollError:
                raise
            except SmartWalletError as e:
                raise PollError(f"Failed to fetch status of {call_id}: {e}", e.code) from e

            if status.status == CallStatusCode.SUCCESS:
                self.logger.info(f"Call {call_id} completed successfully after {attempts} queries")
                return status

            if status.status != CallStatusCode.PENDING:
                self.logger.error(f"Call {call_id} failed with status {status.status}")
                raise PollError(f"Call {call_id} failed with status: {status.status}", status.status)

            rate_limited_log(
                f"Status: {status.status} - call {call_id} still pending, waiting for it to complete...",
                level="info",
                interval=30,
                logger_instance=self.logger
            )

            delay = self.interval
            if deadline is not None:
                remaining = deadline - self._clock()
                if remaining <= 0:
                    raise PollTimeoutError(
                        f"Call {call_id} still pending after {timeout}s ({attempts} queries)",
                        status.status
                    )
                delay = min(delay, remaining)

            if cancel_event.wait(delay):
                raise PollCancelledError(f"Polling of {call_id} cancelled after {attempts} queries")

    def poll_many(
        self,
        call_ids: Sequence[str],
        cancel_event: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
        max_workers: Optional[int] = None
    ) -> List[CallStatus]:
        """
        Poll independent call ids concurrently.

        The first failure stops the remaining polls and is then re-raised.
        Setting ``cancel_event`` stops all of them; the event itself is only
        read, never set, by this method.

        Returns:
            Successful statuses in the order of ``call_ids``
        """
        if not call_ids:
            return []
        stop = threading.Event()
        if cancel_event is not None and cancel_event.is_set():
            stop.set()
        elif cancel_event is not None:
            threading.Thread(target=_propagate, args=(cancel_event, stop), daemon=True).start()
        workers = max_workers or len(call_ids)

        try:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = [pool.submit(self.poll, call_id, stop, timeout) for call_id in call_ids]
                done, _ = wait(futures, return_when=FIRST_EXCEPTION)
                for future in futures:
                    if future in done and future.exception() is not None:
                        stop.set()
                        raise future.exception()
            return [future.result() for future in futures]
        finally:
            stop.set()


def _propagate(source: threading.Event, target: threading.Event, interval: float = 0.05) -> None:
    """Set ``target`` once ``source`` is set; returns as soon as ``target`` is set."""
    while not target.is_set():
        if source.wait(interval):
            target.set()
