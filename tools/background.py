"""
Background generation - runs the generator in a worker pool so a UI thread
can keep drawing while a high order is computed.

Each job is all-or-nothing: the caller gets the complete CellArray or
nothing. Cancelling only abandons the result; the generator is pure, so a
finished-but-abandoned job leaves no trace.

Usage:
    from tools.background import BackgroundGenerator

    with BackgroundGenerator() as bg:
        job = bg.submit(order=4)
        ...
        if user_moved_slider:
            job.cancel()
        else:
            cells = job.result(timeout=30)
"""

import logging
import multiprocessing
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))
from menger_sponge_framework import GenerationRequest, generate_from_request

logger = logging.getLogger("menger_sponge_framework.background")


class GenerationCancelled(RuntimeError):
    """The job was cancelled before its result was collected."""


# ----------------------------------------------------------
# Worker entry point (module-level for pickling)
# ----------------------------------------------------------
def _worker_generate(request):
    return generate_from_request(request)


class PendingGeneration:
    """Handle to one submitted job."""

    def __init__(self, async_result, request):
        self._async_result = async_result
        self.request = request
        self.cancelled = False

    def ready(self):
        return self.cancelled or self._async_result.ready()

    def cancel(self):
        """Abandon the job; its result will never be returned."""
        if not self.cancelled:
            logger.debug("cancelled generation of order %d", self.request.order)
        self.cancelled = True

    def result(self, timeout=None):
        """Block for the CellArray. Re-raises any generator error."""
        if self.cancelled:
            raise GenerationCancelled(f"generation of order {self.request.order} was cancelled")
        return self._async_result.get(timeout)


class BackgroundGenerator:
    """Process pool that runs generate() off the calling thread."""

    def __init__(self, n_workers=1):
        self.n_workers = n_workers
        self._pool = multiprocessing.Pool(processes=n_workers)

    def submit(self, **generate_kwargs):
        """Queue a generation; takes the same keywords as generate().

        The request is validated here so argument errors surface in the
        caller, not inside a worker.
        """
        request = GenerationRequest(**generate_kwargs).validate()
        logger.debug("submitting order %d to %d worker(s)", request.order, self.n_workers)
        async_result = self._pool.apply_async(_worker_generate, (request,))
        return PendingGeneration(async_result, request)

    def close(self):
        """Stop the workers; outstanding jobs are dropped."""
        if self._pool is not None:
            self._pool.terminate()
            self._pool.join()
            self._pool = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
