"""Shared test fixtures for Relation Insight tests."""

import os

import pytest

from relation_insight.config import AnalysisConfig
from relation_insight.facts import FactSource, FieldFact, MethodFact, TypeFact


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path):
    """Keep user/project TOML files and RELATION_INSIGHT_* vars out of tests."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("RELATION_INSIGHT_"):
            monkeypatch.delenv(key)


@pytest.fixture
def config():
    """Default configuration with a short budget."""
    return AnalysisConfig(timeout_seconds=30.0, shutdown_grace_seconds=5.0)


@pytest.fixture
def animal_facts():
    """Abstract Animal with two concrete subclasses."""
    return FactSource(
        [
            TypeFact("Animal", is_abstract=True),
            TypeFact("Dog", supertype="Animal"),
            TypeFact("Cat", supertype="Animal"),
        ]
    )


@pytest.fixture
def car_facts():
    """Car owning an Engine through a final field."""
    return FactSource(
        [
            TypeFact("Car", fields=(FieldFact("engine", "Engine", is_final=True),)),
            TypeFact("Engine"),
        ]
    )


@pytest.fixture
def factory_facts():
    """UserFactory creating Users."""
    return FactSource(
        [
            TypeFact("UserFactory", methods=(MethodFact("createUser", (), "User"),)),
            TypeFact("User"),
        ]
    )


@pytest.fixture
def zoo_facts():
    """A richer model touching every extractor rule."""
    return FactSource(
        [
            TypeFact("com.zoo.Named", is_interface=True),
            TypeFact("com.zoo.Animal", supertype="java.lang.Object", is_abstract=True),
            TypeFact(
                "com.zoo.Dog",
                supertype="com.zoo.Animal",
                contracts=("com.zoo.Named", "java.io.Serializable"),
                fields=(
                    FieldFact("name", "java.lang.String", is_final=True),
                    FieldFact("age", "int"),
                    FieldFact("ownerRef", "com.zoo.Keeper"),
                    FieldFact("friends", "com.zoo.Dog[]"),
                ),
                methods=(
                    MethodFact("fetch", ("com.zoo.Ball", "int"), "void"),
                    MethodFact("self", (), "com.zoo.Dog"),
                ),
                nested_types=("com.zoo.Dog$Collar",),
            ),
            TypeFact("com.zoo.Puppy", supertype="com.zoo.Dog"),
            TypeFact("com.zoo.Keeper", contracts=("com.zoo.Named",)),
            TypeFact("com.zoo.Ball"),
        ]
    )
