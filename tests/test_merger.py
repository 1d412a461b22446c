import pytest

from tessera.config.merger import HierarchicalConfigMerger
from tessera.events import EventDispatcher, LifecycleEvents


@pytest.fixture
def merger():
    return HierarchicalConfigMerger()


def test_nested_values_are_merged(merger):
    merged = merger.merge(
        {"app": {"name": "Dino", "debug": False}},
        {"app": {"debug": True}},
    )

    assert merged == {"app": {"name": "Dino", "debug": True}}


def test_later_configs_take_precedence(merger):
    merged = merger.merge(
        {"db": {"host": "localhost", "port": 5432}},
        {"db": {"host": "staging.internal"}},
        {"db": {"host": "prod.internal"}, "cache": "redis"},
    )

    assert merged == {"db": {"host": "prod.internal", "port": 5432}, "cache": "redis"}


def test_no_configs_yield_empty_mapping(merger):
    assert merger.merge() == {}


def test_lists_are_replaced(merger):
    merged = merger.merge({"hosts": ["a", "b", "c"]}, {"hosts": ["z"]})

    assert merged == {"hosts": ["z"]}


def test_lists_are_not_merged_by_index(merger):
    merged = merger.merge({"ports": [1, 2, 3]}, {"ports": [9]})

    assert merged == {"ports": [9]}


def test_scalar_replaces_mapping_and_back(merger):
    assert merger.merge({"log": {"level": "info"}}, {"log": "off"}) == {"log": "off"}
    assert merger.merge({"log": "off"}, {"log": {"level": "debug"}}) == {
        "log": {"level": "debug"}
    }


def test_inputs_are_not_modified(merger):
    base = {"app": {"name": "Dino", "tags": ["a"]}}
    override = {"app": {"debug": True}}

    merged = merger.merge(base, override)
    merged["app"]["tags"].append("b")
    merged["app"]["name"] = "Rex"

    assert base == {"app": {"name": "Dino", "tags": ["a"]}}
    assert override == {"app": {"debug": True}}


def test_merge_dispatches_events():
    events = EventDispatcher()
    seen = []
    events.subscribe(LifecycleEvents.BEFORE_CONFIG_MERGE, lambda p: seen.append(("before", p)))
    events.subscribe(LifecycleEvents.AFTER_CONFIG_MERGE, lambda p: seen.append(("after", p)))

    HierarchicalConfigMerger(events).merge({"a": 1}, {"b": 2})

    assert seen == [("before", {"count": 2}), ("after", {"count": 2})]
