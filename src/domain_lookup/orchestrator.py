"""
Availability Orchestrator for the domain lookup system.

This module drives a search run: for one search term it queries the
availability of term.tld for every TLD in the catalog, strictly one query
at a time and separated by a fixed pacing interval. It integrates:
- Term validation (invalid terms yield an empty, completed run)
- The API client for availability queries
- The pacer for rate limit friendly spacing
- A cancellation token checked before each query and around each wait

Only one run per orchestrator is live: starting a new run cancels the
previous one. Results reach callers through subscriptions or async
iteration over the run handle.
"""

import asyncio
import itertools
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .api_client import DomainApiClient
from .audit_logger import AuditLogger
from .cancellation import CancellationToken
from .config import DEFAULT_PACING_INTERVAL_SECONDS
from .enums import LogLevel, RunState
from .exceptions import QueryError
from .models import AvailabilityResult, Tld
from .pacer import Pacer
from .term_validator import TermValidator


ResultCallback = Callable[[AvailabilityResult], None]
ErrorCallback = Callable[[QueryError], None]
DoneCallback = Callable[[RunState], None]

_DONE = object()


@dataclass
class _Subscriber:
    on_result: Optional[ResultCallback]
    on_error: Optional[ErrorCallback]
    on_done: Optional[DoneCallback]


class SearchRun:
    """
    Handle for one sweep of availability checks for a single term.

    The result list is append-only and only the orchestrator loop driving
    the run appends to it. The run reaches exactly one terminal state
    (completed, cancelled or failed); nothing is emitted afterwards.
    """

    def __init__(
        self,
        run_id: int,
        term: str,
        tlds: tuple[Tld, ...],
        logger: Optional[AuditLogger] = None,
    ) -> None:
        self._run_id = run_id
        self._term = term
        self._tlds = tlds
        self._logger = logger
        self._results: list[AvailabilityResult] = []
        self._state = RunState.PENDING
        self._error: Optional[QueryError] = None
        self._token = CancellationToken()
        self._done_event = asyncio.Event()
        self._subscribers: list[_Subscriber] = []
        self._queues: list[asyncio.Queue] = []

    def __repr__(self) -> str:
        return (
            f"SearchRun(id={self._run_id}, term={self._term!r}, "
            f"state={self._state.value}, results={len(self._results)}/{len(self._tlds)})"
        )

    @property
    def run_id(self) -> int:
        return self._run_id

    @property
    def term(self) -> str:
        return self._term

    @property
    def tlds(self) -> tuple[Tld, ...]:
        return self._tlds

    @property
    def results(self) -> tuple[AvailabilityResult, ...]:
        """Snapshot of the results emitted so far, in catalog order."""
        return tuple(self._results)

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def error(self) -> Optional[QueryError]:
        return self._error

    @property
    def cancelled(self) -> bool:
        return self._state == RunState.CANCELLED

    @property
    def failed(self) -> bool:
        return self._state == RunState.FAILED

    @property
    def done(self) -> bool:
        return self._state.terminal

    @property
    def token(self) -> CancellationToken:
        return self._token

    def cancel(self) -> bool:
        """
        Cancel the run.

        No query is issued after this call; a query already in flight is
        abandoned and its result discarded. Results emitted so far stay.

        Returns:
            True if the run moved to cancelled, False if it was already
            terminal (in which case nothing changes)
        """
        if self._state.terminal:
            return False
        self._token.cancel()
        self._finish(RunState.CANCELLED)
        return True

    async def wait(self) -> RunState:
        """Wait for the run to reach its terminal state and return it."""
        await self._done_event.wait()
        return self._state

    def subscribe(
        self,
        on_result: Optional[ResultCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        on_done: Optional[DoneCallback] = None,
    ) -> Callable[[], None]:
        """
        Register callbacks for this run.

        Results already emitted are replayed to the new subscriber, and so
        are the error and terminal notifications if the run has finished.

        Returns:
            A callable that removes the subscription
        """
        subscriber = _Subscriber(on_result=on_result, on_error=on_error, on_done=on_done)

        for result in self._results:
            self._notify(subscriber.on_result, result)
        if self._state.terminal:
            if self._error is not None:
                self._notify(subscriber.on_error, self._error)
            self._notify(subscriber.on_done, self._state)
        else:
            self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    async def __aiter__(self):
        """
        Yield results lazily in catalog order, starting with those already emitted.

        Iteration ends when the run reaches its terminal state. For a failed
        run the QueryError is raised after the successful results.
        """
        queue: asyncio.Queue = asyncio.Queue()
        backlog = list(self._results)
        finished = self._state.terminal
        if not finished:
            self._queues.append(queue)

        try:
            for result in backlog:
                yield result

            if not finished:
                while True:
                    item = await queue.get()
                    if item is _DONE:
                        break
                    yield item

            if self._state == RunState.FAILED and self._error is not None:
                raise self._error
        finally:
            if queue in self._queues:
                self._queues.remove(queue)

    # Internal transitions, driven by AvailabilityOrchestrator

    def _mark_running(self) -> None:
        if self._state == RunState.PENDING:
            self._state = RunState.RUNNING

    def _append(self, result: AvailabilityResult) -> None:
        if self._state.terminal:
            return
        self._results.append(result)
        for queue in self._queues:
            queue.put_nowait(result)
        for subscriber in list(self._subscribers):
            self._notify(subscriber.on_result, result)

    def _fail(self, error: QueryError) -> None:
        if self._state.terminal:
            return
        self._error = error
        self._token.cancel()
        for subscriber in list(self._subscribers):
            self._notify(subscriber.on_error, error)
        self._finish(RunState.FAILED)

    def _finish(self, state: RunState) -> None:
        if self._state.terminal:
            return
        self._state = state
        self._done_event.set()
        for queue in self._queues:
            queue.put_nowait(_DONE)
        subscribers, self._subscribers = self._subscribers, []
        for subscriber in subscribers:
            self._notify(subscriber.on_done, state)

    def _notify(self, callback: Optional[Callable], value) -> None:
        if callback is None:
            return
        try:
            callback(value)
        except Exception as e:
            # A broken subscriber must not break the run or other subscribers
            if self._logger:
                self._logger.log_error(
                    "SearchRun",
                    "Subscriber callback raised",
                    error=e,
                    additional_data={"run_id": self._run_id, "term": self._term},
                )


class AvailabilityOrchestrator:
    """
    Sequential, cancellable, paced availability checker.

    Each start() creates a SearchRun driven by its own asyncio task. Queries
    are strictly sequential and separated by the pacing interval; at most
    one run is live at a time.
    """

    async def __aenter__(self) -> "AvailabilityOrchestrator":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.aclose()

    def __init__(
        self,
        client: DomainApiClient,
        pacing_interval: float = DEFAULT_PACING_INTERVAL_SECONDS,
        validator: Optional[TermValidator] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            client: API client used for availability queries
            pacing_interval: Seconds between completion of a query and issue of the next
            validator: Optional term validator (a default one is created)
            logger: Optional audit logger for logging
        """
        if pacing_interval < 0:
            raise ValueError(f"Pacing interval must be non-negative: {pacing_interval}")

        self._client = client
        self._pacing_interval = pacing_interval
        self._validator = validator or TermValidator()
        self._logger = logger
        self._run_ids = itertools.count(1)
        self._current: Optional[SearchRun] = None
        self._current_task: Optional[asyncio.Task] = None
        self._tasks: set[asyncio.Task] = set()
        # Shared by all runs so the interval also holds across a supersede
        self._pacer = Pacer(pacing_interval)

    @property
    def pacing_interval(self) -> float:
        return self._pacing_interval

    @property
    def current_run(self) -> Optional[SearchRun]:
        """The most recently started run, finished or not."""
        return self._current

    @property
    def active_run(self) -> Optional[SearchRun]:
        """The current run while it is still live, else None."""
        if self._current is not None and not self._current.done:
            return self._current
        return None

    def start(self, term: str, catalog: Iterable[Tld]) -> SearchRun:
        """
        Start a new search run, cancelling any live one first.

        Must be called from within a running event loop.

        Args:
            term: Search term (label only); invalid terms give an empty run
            catalog: TldCatalog or any iterable of Tld, in query order

        Returns:
            The SearchRun handle
        """
        previous = self._current
        if previous is not None and previous.cancel():
            self._log_info(
                "AvailabilityOrchestrator",
                f"Run {previous.run_id} superseded",
                {"run_id": previous.run_id, "term": previous.term, "results": len(previous.results)},
            )

        run_id = next(self._run_ids)
        validation = self._validator.validate(term)
        tlds = tuple(catalog)

        if not validation.valid:
            run = SearchRun(run_id, (term or "").strip(), (), logger=self._logger)
            self._current = run
            self._log(
                LogLevel.WARN,
                "AvailabilityOrchestrator",
                f"Ignoring invalid search term: {validation.error.message}",
                {"run_id": run_id, "term": term, "code": validation.error.code.value},
            )
            run._finish(RunState.COMPLETED)
            return run

        run = SearchRun(run_id, validation.canonical_term, tlds, logger=self._logger)
        self._current = run

        self._log_info(
            "AvailabilityOrchestrator",
            f"Starting run {run_id} for term: {run.term}",
            {"run_id": run_id, "term": run.term, "tlds": len(tlds), "pacing": self._pacing_interval},
        )

        if not tlds:
            run._finish(RunState.COMPLETED)
            return run

        task = asyncio.get_running_loop().create_task(self._drive(run, self._current_task))
        self._current_task = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return run

    async def search(self, term: str, catalog: Iterable[Tld]) -> tuple[AvailabilityResult, ...]:
        """
        Run a search to its end and return its results.

        Raises:
            QueryError: If the run failed
        """
        run = self.start(term, catalog)
        await run.wait()
        if run.failed and run.error is not None:
            raise run.error
        return run.results

    async def aclose(self) -> None:
        """Cancel the live run and wait for all driving tasks to finish."""
        if self._current is not None:
            self._current.cancel()
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _drive(self, run: SearchRun, previous: Optional[asyncio.Task] = None) -> None:
        """
        Run loop: query each TLD in order, pacing between queries.

        A superseded run may still have a query in flight; this run issues
        nothing until that task has finished, and the shared pacer then
        spaces the first query from the previous completion.
        """
        token = run.token
        pacer = self._pacer
        seen: set[str] = set()
        run._mark_running()

        try:
            if previous is not None and not previous.done():
                # asyncio.wait does not cancel the previous task if this one is cancelled
                await asyncio.wait({previous})

            for tld in run.tlds:
                full_domain = f"{run.term}.{tld.name}"
                if full_domain in seen:
                    continue

                if pacer.last_completion is not None:
                    status = await pacer.wait(token)
                    if not status.proceed:
                        return

                # Checkpoint before issuing a query
                if token.cancelled:
                    return

                try:
                    result = await self._client.get_availability(run.term, tld)
                except QueryError as e:
                    if token.cancelled:
                        return
                    self._log_query_error(run, full_domain, e)
                    run._fail(e)
                    return
                finally:
                    pacer.record_completion()

                if token.cancelled:
                    self._log(
                        LogLevel.DEBUG,
                        "AvailabilityOrchestrator",
                        f"Discarding in-flight result for {full_domain}",
                        {"run_id": run.run_id},
                    )
                    return

                seen.add(full_domain)
                run._append(result)
                self._log(
                    LogLevel.DEBUG,
                    "AvailabilityOrchestrator",
                    f"{result.full_domain}: {'available' if result.available else 'taken'}",
                    {"run_id": run.run_id, "response_time_ms": round(result.response_time_ms, 1)},
                )

            run._finish(RunState.COMPLETED)
        except Exception as e:
            error = QueryError(
                code="unexpected_error",
                message=f"Unexpected error during run: {e}",
                details={"run_id": run.run_id, "error_type": type(e).__name__},
            )
            error.__cause__ = e
            self._log_query_error(run, None, error)
            run._fail(error)
        finally:
            # Covers task cancellation (CancelledError) as well
            if not run.done:
                token.cancel()
                run._finish(RunState.CANCELLED)
            self._log_info(
                "AvailabilityOrchestrator",
                f"Run {run.run_id} {run.state.value}",
                {"run_id": run.run_id, "term": run.term, "results": len(run.results)},
            )

    def _log_query_error(self, run: SearchRun, full_domain: Optional[str], error: QueryError) -> None:
        if self._logger:
            self._logger.log_error(
                "AvailabilityOrchestrator",
                f"Query failed, stopping run {run.run_id}: {error.message}",
                error=error,
                request_url=error.details.get("request_url"),
                response_status_code=error.details.get("http_status_code"),
                additional_data={"run_id": run.run_id, "domain": full_domain},
            )

    def _log(self, level: LogLevel, component: str, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(level, component, message, data)

    def _log_info(self, component: str, message: str, data: dict) -> None:
        """Log an info message if logger is available."""
        self._log(LogLevel.INFO, component, message, data)
