"""Tests for AnalysisCoordinator: end-to-end runs, time bounds and shutdown."""

import threading
import time

import pytest

from relation_insight.analysis import (
    NO_INPUT_REASON,
    SHUTDOWN_REASON,
    AnalysisCoordinator,
    AnalysisStatus,
    CancellationToken,
    CoordinatorState,
)
from relation_insight.config import AnalysisConfig
from relation_insight.facts import FactSource, MethodFact, TypeFact
from relation_insight.graph import HierarchyBuilder, RelationshipEdge, RelationshipExtractor, RelationshipKind
from relation_insight.patterns import DesignPatternKind


class SlowExtractor(RelationshipExtractor):
    """Extractor that takes ``delay`` seconds per type and flags its first call."""

    def __init__(self, config, delay):
        super().__init__(config)
        self.delay = delay
        self.started = threading.Event()

    def extract(self, fact, source=None):
        self.started.set()
        time.sleep(self.delay)
        return super().extract(fact, source)


def many_types(count):
    return FactSource([TypeFact(f"T{i}") for i in range(count)])


@pytest.fixture
def coordinator(config):
    coordinator = AnalysisCoordinator(config)
    yield coordinator
    coordinator.request_shutdown(grace_seconds=5)


class TestAnalysisScenarios:
    """End-to-end runs over small models."""

    def test_animal_hierarchy(self, coordinator, animal_facts):
        result = coordinator.analyze(animal_facts)

        assert result.status is AnalysisStatus.COMPLETED
        assert result.relationships == {
            RelationshipEdge.inheritance("Dog", "Animal"),
            RelationshipEdge.inheritance("Cat", "Animal"),
        }
        assert result.hierarchies["Dog"].depth == 1
        assert result.hierarchies["Cat"].depth == 1
        assert result.hierarchies["Animal"].depth == 0
        assert result.hierarchies["Animal"].subtypes == {"Dog", "Cat"}
        assert result.metrics.abstract_type_count == 1
        assert result.metrics.widest_hierarchy == 2
        assert result.analyzed_types == 3

    def test_car_engine(self, coordinator, car_facts):
        result = coordinator.analyze(car_facts)

        assert result.successful
        assert result.relationships == {RelationshipEdge.composition("Car", "Engine")}
        assert result.metrics.count(RelationshipKind.COMPOSITION) == 1

    def test_user_factory(self, coordinator, factory_facts):
        result = coordinator.analyze(factory_facts)

        assert result.relationships == {RelationshipEdge.association("UserFactory", "User")}
        (match,) = result.patterns
        assert match.kind is DesignPatternKind.FACTORY
        assert match.anchor == "UserFactory"
        assert match.participants == {"User"}
        assert match.confidence == pytest.approx(0.7)

    def test_pattern_name_in_package(self, coordinator):
        result = coordinator.analyze([TypeFact("com.singleton.Registry")])

        (match,) = result.patterns
        assert match.kind is DesignPatternKind.SINGLETON
        assert match.anchor == "com.singleton.Registry"

    def test_config_manager(self, coordinator):
        result = coordinator.analyze([TypeFact("ConfigManager")])

        (match,) = result.patterns
        assert match.kind is DesignPatternKind.SINGLETON
        assert match.participants == {"ConfigManager"}
        assert match.confidence == pytest.approx(0.6)

    def test_cyclic_supertypes_terminate(self, coordinator):
        result = coordinator.analyze([TypeFact("A", supertype="B"), TypeFact("B", supertype="A")])

        assert result.successful
        assert result.hierarchies["A"].depth <= 1
        assert result.hierarchies["B"].depth <= 1

    def test_self_supertype(self, coordinator):
        result = coordinator.analyze([TypeFact("T", supertype="T")])

        assert result.successful
        assert result.relationships == frozenset()
        assert result.hierarchies["T"].depth == 0

    def test_accepts_mapping_input(self, coordinator, animal_facts):
        result = coordinator.analyze({f.name: f for f in animal_facts})
        assert result.total_relationships == 2


class TestAnalysisInvariants:
    """Properties every completed run must satisfy."""

    def test_hierarchy_for_every_input_type(self, coordinator, zoo_facts):
        result = coordinator.analyze(zoo_facts)
        assert set(result.hierarchies) == set(zoo_facts.names)

    def test_depth_matches_path(self, coordinator, zoo_facts):
        result = coordinator.analyze(zoo_facts)
        for node in result.hierarchies.values():
            assert node.depth == len(node.ancestor_path) - 1
            assert node.ancestor_path[0] == node.type_name

    def test_counts_add_up(self, coordinator, zoo_facts):
        result = coordinator.analyze(zoo_facts)
        metrics = result.metrics
        assert sum(metrics.per_kind_counts.values()) == metrics.total_relationships
        assert metrics.total_relationships == result.total_relationships
        assert 0.0 <= metrics.coupling_index <= 1.0
        assert 0.0 <= metrics.cohesion_index <= 1.0

    def test_edges_originate_from_input_types(self, coordinator, zoo_facts):
        result = coordinator.analyze(zoo_facts)
        assert {e.source for e in result.relationships} <= set(zoo_facts.names)
        assert result.relationships_by_kind(RelationshipKind.DEPENDENCY) == frozenset()

    def test_deterministic(self, coordinator, zoo_facts):
        first = coordinator.analyze(zoo_facts)
        second = coordinator.analyze(FactSource(list(zoo_facts)))
        assert first.relationships == second.relationships
        assert dict(first.hierarchies) == dict(second.hierarchies)
        assert first.patterns == second.patterns
        assert first.metrics == second.metrics

    def test_input_source_unchanged(self, coordinator, zoo_facts):
        before = [fact.to_dict() for fact in zoo_facts]
        coordinator.analyze(zoo_facts)
        assert [fact.to_dict() for fact in zoo_facts] == before


class TestFailFast:
    """Inputs rejected before any work is scheduled."""

    def test_zero_types(self, coordinator):
        result = coordinator.analyze([])
        assert result.status is AnalysisStatus.FAILED
        assert result.error == NO_INPUT_REASON

    def test_none(self, coordinator):
        result = coordinator.analyze(None)
        assert result.status is AnalysisStatus.FAILED
        assert not coordinator.can_analyze(None)

    def test_unsupported_input(self, coordinator):
        result = coordinator.analyze(42)
        assert result.status is AnalysisStatus.FAILED
        assert result.error.startswith("Invalid analysis input")

    def test_can_analyze(self, coordinator, animal_facts):
        assert coordinator.can_analyze(animal_facts)
        assert not coordinator.can_analyze([])

    def test_can_analyze_leaves_generator_usable(self, coordinator):
        facts = (fact for fact in [TypeFact("A"), TypeFact("B")])
        assert not coordinator.can_analyze(facts)
        result = coordinator.analyze(facts)
        assert result.successful
        assert result.analyzed_types == 2

    def test_can_analyze_does_not_consume_collections(self, coordinator, animal_facts):
        facts = list(animal_facts)
        assert coordinator.can_analyze(facts)
        assert coordinator.can_analyze({f.name: f for f in facts})
        assert coordinator.analyze(facts).analyzed_types == 3

    def test_can_analyze_rejects_non_iterable(self, coordinator):
        assert not coordinator.can_analyze(42)


class TestTimeBounds:
    """Timeouts and caller cancellation."""

    def test_timeout(self):
        config = AnalysisConfig(timeout_seconds=0.1, shutdown_grace_seconds=2)
        coordinator = AnalysisCoordinator(config, extractor=SlowExtractor(config, delay=0.05))
        try:
            started = time.monotonic()
            result = coordinator.analyze(many_types(50))
            elapsed = time.monotonic() - started
        finally:
            coordinator.request_shutdown()

        assert result.status is AnalysisStatus.TIMED_OUT
        assert "timed out" in result.error
        assert result.relationships == frozenset()
        assert result.metrics is None
        assert elapsed < 2.0

    def test_caller_cancellation(self, coordinator, animal_facts):
        token = CancellationToken()
        token.cancel()
        result = coordinator.analyze(animal_facts, token=token)
        assert result.status is AnalysisStatus.CANCELLED
        assert result.error == "Analysis cancelled"

    def test_cancellation_mid_run(self, config):
        extractor = SlowExtractor(config, delay=0.05)
        coordinator = AnalysisCoordinator(config, extractor=extractor)
        token = CancellationToken()
        threading.Thread(target=lambda: extractor.started.wait(5) and token.cancel()).start()
        try:
            result = coordinator.analyze(many_types(50), token=token)
        finally:
            coordinator.request_shutdown()
        assert result.status is AnalysisStatus.CANCELLED

    def test_failed_hierarchy_falls_back_to_root(self, config, animal_facts):
        class BrokenBuilder(HierarchyBuilder):
            def build(self, fact, source):
                raise RuntimeError("corrupt facts")

        with AnalysisCoordinator(config, hierarchy_builder=BrokenBuilder(config)) as coordinator:
            result = coordinator.analyze(animal_facts)
        assert result.successful
        assert all(node.depth == 0 for node in result.hierarchies.values())

    def test_unexpected_error_fails_run(self, config, animal_facts):
        class BrokenDetector:
            def detect(self, relationships, hierarchies):
                raise RuntimeError("detector exploded")

        with AnalysisCoordinator(config, pattern_detector=BrokenDetector()) as coordinator:
            result = coordinator.analyze(animal_facts)
        assert result.status is AnalysisStatus.FAILED
        assert "detector exploded" in result.error


class TestLifecycle:
    """Shutdown behavior."""

    def test_state_transitions(self, config, animal_facts):
        coordinator = AnalysisCoordinator(config)
        assert coordinator.state is CoordinatorState.IDLE
        coordinator.analyze(animal_facts)
        assert coordinator.state is CoordinatorState.IDLE
        coordinator.request_shutdown()
        assert coordinator.state is CoordinatorState.SHUT_DOWN
        assert coordinator.is_shutdown

    def test_analyze_after_shutdown(self, config, animal_facts):
        coordinator = AnalysisCoordinator(config)
        coordinator.request_shutdown()
        result = coordinator.analyze(animal_facts)
        assert result.status is AnalysisStatus.FAILED
        assert result.error == SHUTDOWN_REASON
        assert not coordinator.can_analyze(animal_facts)

    def test_shutdown_is_idempotent(self, config):
        coordinator = AnalysisCoordinator(config)
        coordinator.request_shutdown()
        coordinator.request_shutdown()
        assert coordinator.is_shutdown

    def test_context_manager_shuts_down(self, config, animal_facts):
        with AnalysisCoordinator(config) as coordinator:
            assert coordinator.analyze(animal_facts).successful
        assert coordinator.is_shutdown

    def test_shutdown_stops_in_flight_run(self, config):
        extractor = SlowExtractor(config, delay=0.05)
        coordinator = AnalysisCoordinator(config, extractor=extractor)
        results = []
        runner = threading.Thread(target=lambda: results.append(coordinator.analyze(many_types(50))))
        runner.start()
        assert extractor.started.wait(5)

        coordinator.request_shutdown(grace_seconds=5)
        runner.join(5)

        assert not runner.is_alive()
        (result,) = results
        assert result.status is AnalysisStatus.FAILED
        assert result.error == SHUTDOWN_REASON

    def test_supported_kinds(self, config):
        with AnalysisCoordinator(config) as coordinator:
            assert coordinator.supported_relationship_kinds() == list(RelationshipKind)

    def test_restricted_kinds(self):
        config = AnalysisConfig(relationship_kinds=["ASSOCIATION"])
        with AnalysisCoordinator(config) as coordinator:
            assert coordinator.supported_relationship_kinds() == [RelationshipKind.ASSOCIATION]
            result = coordinator.analyze(
                [
                    TypeFact("A", supertype="B", methods=(MethodFact("make", (), "C"),)),
                    TypeFact("B"),
                ]
            )
        assert result.relationships == {RelationshipEdge.association("A", "C")}


@pytest.mark.slow
class TestConcurrentRuns:
    def test_parallel_callers(self, config, zoo_facts):
        with AnalysisCoordinator(config) as coordinator:
            expected = coordinator.analyze(zoo_facts).relationships
            results = []
            threads = [
                threading.Thread(target=lambda: results.append(coordinator.analyze(zoo_facts)))
                for _ in range(8)
            ]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join(30)
        assert len(results) == 8
        assert all(r.relationships == expected for r in results)
