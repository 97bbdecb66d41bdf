"""
RTSP Test Server - Process signal handling

Crash signals (SIGSEGV, SIGABRT, SIGFPE, SIGBUS, SIGILL) are left to
faulthandler: it writes a bounded crash record straight to the log stream's
file descriptor from signal context, then restores the default action and
re-raises, so the process still dies with the original signal (core dump,
exit status seen by the supervisor). The record names the signal
(`Fatal Python error: Segmentation fault`) but does not carry its number,
and it is written raw, not in the logging format.

SIGINT/SIGTERM are the only in-process way to stop the server: the handler
logs a notice and asks the published main loop to quit.
"""

import faulthandler
import io
import logging
import signal
import sys

from rtsp_test_server.log import flush_logging

logger = logging.getLogger(__name__)

CRASH_SIGNALS = (signal.SIGSEGV, signal.SIGABRT, signal.SIGFPE, signal.SIGBUS, signal.SIGILL)
GRACEFUL_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def signal_name(signum: int) -> str:
    return signal.strsignal(signum) or 'unknown'


class LoopHandle:
    """Stop handle for the main loop, shared with the signal handlers.

    Written once by the runtime (publish), only read afterwards. A stop
    requested before publication, or before the loop runs, is remembered in
    ``stop_requested``; the runtime re-checks it from inside the running loop.
    """

    def __init__(self):
        self._loop = None
        self.stop_requested = False

    @property
    def loop(self):
        return self._loop

    def publish(self, loop):
        if self._loop is not None:
            raise RuntimeError("Main loop already published")
        self._loop = loop

    def request_stop(self) -> bool:
        """Quit the loop if one is published. Safe to call any number of times."""
        self.stop_requested = True
        loop = self._loop
        if loop is None:
            return False
        loop.quit()
        return True


class SignalGovernor:
    def __init__(self, loop_handle: LoopHandle, crash_stream=None):
        self.loop_handle = loop_handle
        self.crash_stream = crash_stream
        self._previous = {}
        self._installed = False

    def install(self):
        """Install crash and shutdown handlers. Call once, before the engine starts."""
        if self._installed:
            return
        self._enable_crash_handler()
        for signum in GRACEFUL_SIGNALS:
            self._previous[signum] = signal.signal(signum, self._on_shutdown_signal)
        self._installed = True

    def uninstall(self):
        if not self._installed:
            return
        for signum, handler in self._previous.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        self._previous.clear()
        faulthandler.disable()
        self._installed = False

    def _enable_crash_handler(self):
        stream = self.crash_stream or sys.stdout
        try:
            faulthandler.enable(file=stream, all_threads=True)
        except (AttributeError, ValueError, io.UnsupportedOperation) as e:
            # stream without a usable file descriptor
            logger.warning(f"Crash log stream unusable ({e}), using stderr")
            faulthandler.enable(file=sys.__stderr__, all_threads=True)
        names = ', '.join(signal.Signals(s).name for s in CRASH_SIGNALS)
        logger.debug(f"Crash handler armed for {names}")

    def _on_shutdown_signal(self, signum, frame):
        logger.info(f"Received signal {signum} ({signal_name(signum)}), shutting down...")
        flush_logging()
        self.loop_handle.request_stop()
