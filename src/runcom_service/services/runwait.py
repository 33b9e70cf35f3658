"""Blocking until the daemon is asked to terminate."""

import logging
import queue
import signal

logger = logging.getLogger(__name__)

# Signals that end a foreground run.
TERMINATION_SIGNALS = (signal.SIGTERM, signal.SIGINT)

# Signals held before further ones are dropped.
MAX_PENDING_SIGNALS = 3


def run_wait():
    """Block until SIGTERM or SIGINT is delivered.

    Must be called from the main thread, since only it can install signal
    handlers.  The previous handlers are restored before returning.

    The handler runs in the main thread, possibly in the middle of get(), so
    it only uses SimpleQueue.put, which is reentrant.
    """
    signals: queue.SimpleQueue = queue.SimpleQueue()

    def _handler(signum, frame):
        # Only the first signal matters.
        if signals.qsize() < MAX_PENDING_SIGNALS:
            signals.put(signum)

    previous = {sig: signal.signal(sig, _handler) for sig in TERMINATION_SIGNALS}
    try:
        while True:
            try:
                signum = signals.get(timeout=1)
                break
            except queue.Empty:
                continue
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    logger.info(f"Received {signal.Signals(signum).name}, stopping")
