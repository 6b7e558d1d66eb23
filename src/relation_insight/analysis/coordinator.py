"""AnalysisCoordinator: bounded-time, cancellable relationship analysis.

Orchestrates, on a worker thread distinct from the caller:
1. Per-type extraction (RelationshipExtractor) and hierarchy building
   (HierarchyBuilder), sequentially in input order
2. Subtype linking
3. Pattern detection (PatternDetector)
4. Metrics aggregation (MetricsCalculator)

The caller blocks until the worker finishes or the wall-clock budget runs
out. Every outcome comes back as an AnalysisResult; no exception crosses
``analyze()``.

Lifecycle: IDLE -> RUNNING (while any run is in flight) -> IDLE, until
``request_shutdown()`` moves the coordinator to SHUT_DOWN for good.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Mapping
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from concurrent.futures import wait
from enum import Enum
from typing import Optional

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..exceptions import (
    AnalysisCancelledError,
    AnalysisTimeoutError,
    AnalyzerShutdownError,
    InvalidInputError,
)
from ..facts import FactSource
from ..facts.source import FactInput
from ..graph import (
    ClassHierarchyNode,
    HierarchyBuilder,
    MetricsCalculator,
    RelationshipEdge,
    RelationshipExtractor,
    RelationshipKind,
)
from ..logging_config import get_logger
from ..patterns import PatternDetector
from .cancellation import CancellationToken, CancelReason
from .models import AnalysisResult

logger = get_logger(__name__)

SHUTDOWN_REASON = "Analyzer has been shut down"
NO_INPUT_REASON = "No type facts supplied"


class CoordinatorState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    SHUT_DOWN = "shut_down"


class AnalysisCoordinator:
    """Runs the full relationship analysis inside a time-bounded unit of work."""

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        extractor: Optional[RelationshipExtractor] = None,
        hierarchy_builder: Optional[HierarchyBuilder] = None,
        pattern_detector: Optional[PatternDetector] = None,
        metrics_calculator: Optional[MetricsCalculator] = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self.extractor = extractor or RelationshipExtractor(self.config)
        self.hierarchy_builder = hierarchy_builder or HierarchyBuilder(self.config)
        self.pattern_detector = pattern_detector or PatternDetector()
        self.metrics_calculator = metrics_calculator or MetricsCalculator()

        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="relation-analysis",
        )
        self._lock = threading.Lock()
        self._shutdown = False
        self._active: dict[CancellationToken, Future] = {}

        logger.info(
            f"Initialized AnalysisCoordinator with {len(self.extractor.supported_kinds)} "
            f"relationship kinds, {self.config.max_workers} workers"
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> CoordinatorState:
        with self._lock:
            if self._shutdown:
                return CoordinatorState.SHUT_DOWN
            if self._active:
                return CoordinatorState.RUNNING
            return CoordinatorState.IDLE

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def supported_relationship_kinds(self) -> list[RelationshipKind]:
        return [kind for kind in RelationshipKind if kind in self.extractor.supported_kinds]

    def can_analyze(self, facts: Optional[FactInput]) -> bool:
        """True when not shut down and ``facts`` holds at least one type.

        Never consumes ``facts``. One-shot iterators (generators, ``iter(...)``)
        cannot be checked without consuming them, so they report False;
        ``analyze`` still accepts them.
        """
        if facts is None or self._shutdown:
            return False
        if isinstance(facts, (FactSource, Mapping)):
            return len(facts) > 0
        try:
            if iter(facts) is facts:
                return False
            return any(True for _ in facts)
        except TypeError:
            return False

    def analyze(
        self, facts: Optional[FactInput], token: Optional[CancellationToken] = None
    ) -> AnalysisResult:
        """Analyze every type in ``facts``.

        Args:
            facts: A FactSource, a mapping of name to TypeFact, or an
                iterable of TypeFacts
            token: Optional caller-owned token; cancelling it ends the run
                with a CANCELLED result

        Returns:
            COMPLETED with full results, or TIMED_OUT / CANCELLED / FAILED
            with a reason and no partial data
        """
        started = time.monotonic()

        if self._shutdown:
            return AnalysisResult.failed(SHUTDOWN_REASON)

        try:
            source = FactSource.of(facts)
        except (TypeError, AttributeError) as e:
            return AnalysisResult.failed(str(InvalidInputError(f"unsupported fact collection: {e}")))

        if len(source) == 0:
            return AnalysisResult.failed(NO_INPUT_REASON)

        run_token = CancellationToken(self.config.timeout_seconds)
        with self._lock:
            if self._shutdown:
                return AnalysisResult.failed(SHUTDOWN_REASON)
            try:
                future = self._executor.submit(self._run, source, run_token, token)
            except RuntimeError:
                # Executor shut down between the flag check and submit
                return AnalysisResult.failed(SHUTDOWN_REASON)
            self._active[run_token] = future

        logger.info(f"Starting relationship analysis for {len(source)} types")

        try:
            return self._await(future, run_token, started)
        finally:
            with self._lock:
                self._active.pop(run_token, None)

    def request_shutdown(self, grace_seconds: Optional[float] = None) -> None:
        """Stop accepting runs and stop the ones in flight.

        In-flight runs see their token cancelled at the next type boundary.
        Queued runs are dropped. Waits up to ``grace_seconds`` (default from
        config) for running workers; anything still running afterwards is
        abandoned. Calling this more than once is harmless.
        """
        with self._lock:
            if self._shutdown:
                return
            self._shutdown = True
            active = dict(self._active)

        logger.info("Shutting down AnalysisCoordinator...")

        for run_token in active:
            run_token.cancel(CancelReason.SHUTDOWN, SHUTDOWN_REASON)

        self._executor.shutdown(wait=False, cancel_futures=True)

        grace = self.config.shutdown_grace_seconds if grace_seconds is None else grace_seconds
        if active:
            _, not_done = wait(list(active.values()), timeout=grace)
            if not_done:
                logger.warning(
                    f"{len(not_done)} analysis run(s) did not stop within {grace}s; abandoning them"
                )

        logger.info("AnalysisCoordinator shutdown complete")

    def __enter__(self) -> AnalysisCoordinator:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.request_shutdown()

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _await(self, future: Future, run_token: CancellationToken, started: float) -> AnalysisResult:
        timeout = self.config.timeout_seconds
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            run_token.cancel(CancelReason.TIMED_OUT)
            future.cancel()
            logger.warning(f"Analysis timed out after {timeout} seconds")
            return AnalysisResult.timed_out(
                f"Analysis timed out after {timeout} seconds", time.monotonic() - started
            )
        except CancelledError:
            # Dropped from the queue by shutdown before it started
            if self._shutdown:
                return AnalysisResult.failed(SHUTDOWN_REASON, time.monotonic() - started)
            return AnalysisResult.cancelled("Analysis was cancelled", time.monotonic() - started)
        except AnalyzerShutdownError:
            return AnalysisResult.failed(SHUTDOWN_REASON, time.monotonic() - started)
        except AnalysisTimeoutError as e:
            logger.warning(f"Analysis timed out after {timeout} seconds")
            return AnalysisResult.timed_out(str(e), time.monotonic() - started)
        except AnalysisCancelledError as e:
            logger.info("Analysis cancelled by caller")
            return AnalysisResult.cancelled(str(e), time.monotonic() - started)
        except Exception as e:
            logger.error(f"Analysis execution failed: {e}")
            return AnalysisResult.failed(f"Analysis failed: {e}", time.monotonic() - started)

    def _run(
        self,
        source: FactSource,
        run_token: CancellationToken,
        caller_token: Optional[CancellationToken],
    ) -> AnalysisResult:
        """The unit of work executed on the pool."""
        started = time.monotonic()
        logger.debug(f"Performing relationship analysis for {len(source)} types")

        relationships: set[RelationshipEdge] = set()
        hierarchies: dict[str, ClassHierarchyNode] = {}

        for fact in source:
            self._checkpoint(run_token, caller_token)
            relationships |= self.extractor.extract(fact, source)
            try:
                hierarchies[fact.name] = self.hierarchy_builder.build(fact, source)
            except Exception as e:
                logger.warning(f"Failed to build hierarchy for {fact.name}: {e}")
                hierarchies[fact.name] = ClassHierarchyNode.root(fact.name)

        self._checkpoint(run_token, caller_token)
        hierarchies = self.hierarchy_builder.link_subtypes(hierarchies)
        patterns = self.pattern_detector.detect(relationships, hierarchies)

        self._checkpoint(run_token, caller_token)
        metrics = self.metrics_calculator.calculate(relationships, hierarchies, len(source))

        logger.info(
            f"Analysis complete: {len(relationships)} relationships, {len(hierarchies)} "
            f"hierarchies, {len(patterns)} patterns detected"
        )

        return AnalysisResult.completed(
            relationships,
            hierarchies,
            patterns,
            metrics,
            analyzed_types=len(source),
            duration_seconds=time.monotonic() - started,
        )

    @staticmethod
    def _checkpoint(run_token: CancellationToken, caller_token: Optional[CancellationToken]) -> None:
        run_token.raise_if_cancelled()
        if caller_token is not None:
            caller_token.raise_if_cancelled()
