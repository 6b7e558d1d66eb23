"""Tests for design pattern heuristics."""

import pytest

from relation_insight.graph import ClassHierarchyNode, RelationshipEdge
from relation_insight.patterns import (
    DesignPatternKind,
    DesignPatternMatch,
    PatternDetector,
    detect_factories,
    detect_observers,
    detect_singletons,
)


def roots(*names):
    return {name: ClassHierarchyNode.root(name) for name in names}


class TestSingletonHeuristic:
    """Leaf types named *singleton*, *manager or *instance."""

    @pytest.mark.parametrize(
        "name",
        ["ConfigManager", "com.acme.SessionManager", "SingletonRegistry", "AppInstance"],
    )
    def test_matching_names(self, name):
        matches = detect_singletons(set(), roots(name))
        assert matches == {DesignPatternMatch.singleton(name)}

    def test_match_details(self):
        (match,) = detect_singletons(set(), roots("ConfigManager"))
        assert match.kind is DesignPatternKind.SINGLETON
        assert match.participants == {"ConfigManager"}
        assert match.confidence == pytest.approx(0.6)

    def test_non_matching_name(self):
        assert detect_singletons(set(), roots("Managerial", "Engine")) == set()

    def test_supertype_is_not_a_singleton(self):
        edges = {RelationshipEdge.inheritance("CustomManager", "BaseManager")}
        matches = detect_singletons(edges, roots("BaseManager", "CustomManager"))
        assert {m.anchor for m in matches} == {"CustomManager"}

    def test_package_segment_counts(self):
        matches = detect_singletons(set(), roots("com.singleton.Registry"))
        assert matches == {DesignPatternMatch.singleton("com.singleton.Registry")}

    def test_manager_package_needs_manager_suffix(self):
        assert detect_singletons(set(), roots("com.manager.Engine")) == set()


class TestFactoryHeuristic:
    def test_factory_with_products(self):
        edges = {
            RelationshipEdge.association("UserFactory", "User"),
            RelationshipEdge.aggregation("UserFactory", "Cache"),
        }
        (match,) = detect_factories(edges, roots("UserFactory", "User"))
        assert match.kind is DesignPatternKind.FACTORY
        assert match.anchor == "UserFactory"
        assert match.participants == {"User"}
        assert match.confidence == pytest.approx(0.7)

    def test_factory_without_products(self):
        edges = {RelationshipEdge.aggregation("UserFactory", "Cache")}
        assert detect_factories(edges, roots("UserFactory")) == set()

    def test_dependency_counts_as_product(self):
        edges = {RelationshipEdge.dependency("WidgetFactory", "Widget")}
        (match,) = detect_factories(edges, roots("WidgetFactory"))
        assert match.participants == {"Widget"}

    def test_factory_package_counts(self):
        edges = {RelationshipEdge.association("com.factory.Builder", "com.acme.Widget")}
        (match,) = detect_factories(edges, roots("com.factory.Builder"))
        assert match.participants == {"com.acme.Widget"}

    def test_factory_must_be_analyzed(self):
        edges = {RelationshipEdge.association("UserFactory", "User")}
        assert detect_factories(edges, roots("User")) == set()


class TestObserverHeuristic:
    def test_subject_with_two_observers(self):
        edges = {
            RelationshipEdge.association("EventSubject", "Listener"),
            RelationshipEdge.association("EventSubject", "Logger"),
        }
        (match,) = detect_observers(edges, roots("EventSubject"))
        assert match.kind is DesignPatternKind.OBSERVER
        assert match.participants == {"Listener", "Logger"}
        assert match.confidence == pytest.approx(0.6)

    def test_single_observer_not_enough(self):
        edges = {RelationshipEdge.association("PriceObservable", "Display")}
        assert detect_observers(edges, roots("PriceObservable")) == set()

    def test_subject_package_counts(self):
        edges = {
            RelationshipEdge.association("com.subject.Hub", "com.acme.X"),
            RelationshipEdge.association("com.subject.Hub", "com.acme.Y"),
        }
        (match,) = detect_observers(edges, {})
        assert match.anchor == "com.subject.Hub"
        assert match.participants == {"com.acme.X", "com.acme.Y"}

    def test_only_associations_count(self):
        edges = {
            RelationshipEdge.aggregation("EventSubject", "Listener"),
            RelationshipEdge.composition("EventSubject", "Logger"),
        }
        assert detect_observers(edges, roots("EventSubject")) == set()


class TestPatternDetector:
    """Test the combined detector."""

    def test_union_of_heuristics(self):
        edges = {
            RelationshipEdge.association("UserFactory", "User"),
            RelationshipEdge.association("EventSubject", "Listener"),
            RelationshipEdge.association("EventSubject", "Logger"),
        }
        matches = PatternDetector().detect(edges, roots("UserFactory", "User", "EventSubject", "ConfigManager"))
        assert {(m.kind, m.anchor) for m in matches} == {
            (DesignPatternKind.FACTORY, "UserFactory"),
            (DesignPatternKind.OBSERVER, "EventSubject"),
            (DesignPatternKind.SINGLETON, "ConfigManager"),
        }

    def test_one_match_per_kind_and_anchor(self):
        matches = PatternDetector().detect(set(), roots("FactoryManager"))
        assert len(matches) == 1

    def test_custom_heuristics(self):
        detector = PatternDetector(heuristics=(detect_singletons,))
        edges = {RelationshipEdge.association("UserFactory", "User")}
        assert detector.detect(edges, roots("UserFactory")) == set()

    def test_confidence_bounds(self):
        with pytest.raises(ValueError):
            DesignPatternMatch(DesignPatternKind.FACTORY, "F", confidence=1.5)
