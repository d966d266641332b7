"""
Candidate contract and the adapter that runs it under a per-query deadline.

A candidate is anything exposing `search(query)` and, optionally,
`setup(dataset_path)` and `cleanup()`: a module, a `Candidate` subclass
instance, or any object with those attributes. Each hook may be a plain
function or a coroutine function.
"""

import asyncio
import importlib
import importlib.util
import inspect
import logging
import queue
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional

from .errors import CandidateLoadError
from .models import CaseOutcome, QueryText, RecordId

logger = logging.getLogger(__name__)


class Candidate(ABC):
    """Abstract interface for a class-based name matcher under test."""

    def setup(self, dataset_path: str) -> None:
        """Load and index the dataset. Not timed as part of any query."""

    @abstractmethod
    def search(self, query: QueryText) -> List[RecordId]:
        """Return ids of the records matching `query`."""
        pass

    def cleanup(self) -> None:
        """Release whatever setup acquired."""


def load_candidate(spec: str) -> Any:
    """Import a candidate from `package.module`, `path/to/file.py`, or either with `:attribute`.

    A class attribute is instantiated with no arguments.
    """
    logger.info(f"Loading candidate {spec}")
    module_part, _, attr = spec.partition(":")

    try:
        if module_part.endswith(".py"):
            module = _import_file(Path(module_part))
        else:
            module = importlib.import_module(module_part)
    except CandidateLoadError:
        raise
    except Exception as e:
        raise CandidateLoadError(f"Cannot import candidate '{module_part}': {e}") from e

    if not attr:
        return module

    try:
        target = getattr(module, attr)
    except AttributeError as e:
        raise CandidateLoadError(f"Candidate '{module_part}' has no attribute '{attr}'") from e

    if inspect.isclass(target):
        logger.info(f"Instantiating candidate class {target.__name__}")
        target = target()
    return target


def _import_file(path: Path) -> Any:
    if not path.exists():
        raise CandidateLoadError(f"Candidate file not found: {path}")
    module_name = f"name_challenge_candidate_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise CandidateLoadError(f"Cannot load candidate file: {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def normalize_ids(raw: Any) -> List[RecordId]:
    """Stringify, trim and de-duplicate candidate output, keeping first occurrences.

    Anything that is not a sequence-like collection of ids yields an empty list.
    """
    if raw is None or isinstance(raw, (str, bytes, Mapping)):
        return []
    try:
        items = list(raw)
    except TypeError:
        return []

    out: List[RecordId] = []
    seen = set()
    for value in items:
        record_id = str(value).strip()
        if not record_id or record_id in seen:
            continue
        seen.add(record_id)
        out.append(RecordId(record_id))
    return out


def _is_async(fn: Callable) -> bool:
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(
        getattr(fn, "__call__", None))


def _error_message(error: BaseException) -> str:
    return str(error) or type(error).__name__


def _discard_late_result(future: "asyncio.Future") -> None:
    # Abandoned calls may still fail later; retrieve so asyncio does not log it
    if not future.cancelled():
        future.exception()


def _settle(future: "asyncio.Future", value: Any, error: Optional[BaseException]) -> None:
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(value)


class _CandidateThread:
    """Daemon thread that runs synchronous candidate hooks one at a time, in order.

    setup, every search and cleanup share this thread, so thread-bound state
    created in setup (sqlite connections, thread locals) stays usable in search.
    """

    def __init__(self):
        self._jobs: "queue.Queue" = queue.Queue()
        self._thread = threading.Thread(target=self._work, name="candidate-worker", daemon=True)
        self._thread.start()

    def submit(self, fn: Callable, *args: Any) -> "asyncio.Future":
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        self._jobs.put((fn, args, loop, future))
        return future

    def stop(self) -> None:
        """Let the thread exit once the job it is running, if any, returns."""
        self._jobs.put(None)

    def _work(self) -> None:
        while True:
            job = self._jobs.get()
            if job is None:
                return
            fn, args, loop, future = job
            value, error = None, None
            try:
                value = fn(*args)
                if asyncio.iscoroutine(value):
                    value = asyncio.run(value)
            except Exception as e:
                error = e
            try:
                loop.call_soon_threadsafe(_settle, future, value, error)
            except RuntimeError:
                logger.debug("Dropping late candidate result; event loop is closed")


class CandidateAdapter:
    """Runs the three-phase candidate lifecycle and bounds each search by a deadline.

    Coroutine hooks run on the event loop. Synchronous hooks run on a single
    worker thread owned by the adapter; it is only replaced when a search
    misses its deadline and the thread has to be abandoned.
    """

    def __init__(self, candidate: Any, name: Optional[str] = None):
        """Wrap `candidate`; it must expose a callable `search`."""
        search = getattr(candidate, "search", None)
        if not callable(search):
            raise CandidateLoadError(
                f"Candidate {candidate!r} does not expose a callable 'search'")
        self.candidate = candidate
        self.name = name or getattr(candidate, "__name__", type(candidate).__name__)
        self._search = search
        self._setup = self._optional_hook("setup")
        self._cleanup = self._optional_hook("cleanup")
        self._worker: Optional[_CandidateThread] = None
        logger.info(
            f"Candidate adapter ready for {self.name} "
            f"(setup={'yes' if self._setup else 'no'}, cleanup={'yes' if self._cleanup else 'no'})")

    def _optional_hook(self, name: str) -> Optional[Callable]:
        hook = getattr(self.candidate, name, None)
        return hook if callable(hook) else None

    def _start(self, fn: Callable, *args: Any) -> "asyncio.Future":
        if _is_async(fn):
            return asyncio.ensure_future(fn(*args))
        if self._worker is None:
            self._worker = _CandidateThread()
        return self._worker.submit(fn, *args)

    def _abandon_worker(self) -> None:
        if self._worker is not None:
            logger.warning(
                "Abandoning candidate worker thread after a timeout; "
                "later calls run on a new thread")
            self._worker.stop()
            self._worker = None

    async def setup(self, dataset_path: str) -> float:
        """Call the candidate's setup, if any. Returns elapsed milliseconds."""
        if self._setup is None:
            logger.info("Candidate has no setup; skipping")
            return 0.0
        logger.info(f"Running candidate setup with {dataset_path}")
        start = time.perf_counter()
        await self._start(self._setup, dataset_path)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"Candidate setup finished in {elapsed_ms:.1f}ms")
        return elapsed_ms

    async def cleanup(self) -> float:
        """Call the candidate's cleanup, if any, then release the worker thread."""
        try:
            if self._cleanup is None:
                logger.info("Candidate has no cleanup; skipping")
                return 0.0
            logger.info("Running candidate cleanup")
            start = time.perf_counter()
            await self._start(self._cleanup)
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(f"Candidate cleanup finished in {elapsed_ms:.1f}ms")
            return elapsed_ms
        finally:
            if self._worker is not None:
                self._worker.stop()
                self._worker = None

    async def search(self, query: QueryText, timeout_ms: float) -> CaseOutcome:
        """Run one search; whichever of result or deadline settles first decides the outcome.

        Errors and timeouts never raise: they produce an outcome with no ids
        and `runtime_error` set. A call that misses the deadline is sent a
        cancellation (coroutines) or abandoned with its thread (synchronous
        candidates); its eventual result is dropped.
        """
        start = time.perf_counter()
        try:
            future = self._start(self._search, query)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.warning(f"Candidate search failed for query '{query}': {e}")
            return CaseOutcome(returned_ids=[], elapsed_ms=elapsed_ms,
                               runtime_error=_error_message(e))

        done, _ = await asyncio.wait({future}, timeout=timeout_ms / 1000)
        elapsed_ms = (time.perf_counter() - start) * 1000

        if future not in done:
            future.add_done_callback(_discard_late_result)
            future.cancel()
            if not _is_async(self._search):
                self._abandon_worker()
            message = f"search timed out after {timeout_ms:g}ms"
            logger.warning(f"Candidate {message} for query '{query}'")
            return CaseOutcome(returned_ids=[], elapsed_ms=elapsed_ms,
                               runtime_error=message, timed_out=True)

        if future.cancelled():
            logger.warning(f"Candidate search was cancelled for query '{query}'")
            return CaseOutcome(returned_ids=[], elapsed_ms=elapsed_ms,
                               runtime_error="search was cancelled")

        error = future.exception()
        if error is not None:
            logger.warning(f"Candidate search failed for query '{query}': {error!r}")
            return CaseOutcome(returned_ids=[], elapsed_ms=elapsed_ms,
                               runtime_error=_error_message(error))

        raw = future.result()
        returned_ids = normalize_ids(raw)
        logger.debug(f"Candidate returned {len(returned_ids)} ids in {elapsed_ms:.1f}ms")
        return CaseOutcome(returned_ids=returned_ids, elapsed_ms=elapsed_ms)
