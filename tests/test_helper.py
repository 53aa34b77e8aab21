# tests/test_helper.py
import asyncio

import pydantic
import pytest

from pystorelite import Store, StoreConfig, StoreHelper, create_store
from counter import counter_update, decrement, dict_counter_update, increment, sync


class Counter(StoreHelper[int, object]):
    def provide_initial_model(self):
        return 0

    def update(self, model, action):
        return counter_update(model, action)


class LoadingCounter(StoreHelper[dict, object]):
    """Loads its starting count from an async source, then counts down to zero."""

    def __init__(self, start, **kwargs):
        self.start = start
        super().__init__(**kwargs)

    def provide_initial_model(self):
        return {"count": 0}

    def update(self, model, action):
        if action.type == "sync":
            return {**model, "count": action.payload}
        return dict_counter_update(model, action)

    async def run_initial_effect(self, model):
        await asyncio.sleep(0)
        return sync(self.start)

    async def run_effect(self, model, action):
        if model["count"] > 0:
            return decrement()
        return None


def test_helper_builds_exactly_one_store():
    counter = Counter()
    assert isinstance(counter.store, Store)
    assert counter.store is counter.store
    assert counter.get_model() == 0


def test_helper_forwards_dispatch_and_listeners():
    counter = Counter()
    calls = []
    unsubscribe = counter.add_listener(lambda: calls.append(counter.get_model()))
    counter.dispatch(increment())
    counter.dispatch(increment())
    unsubscribe()
    counter.dispatch(decrement())

    assert calls == [1, 2]
    assert counter.store.get_model() == 1


def test_helper_without_effect_overrides_needs_no_loop():
    counter = Counter()
    assert counter.config.initial_effect is None
    assert counter.config.effect is None


def test_helper_passes_bound_methods():
    counter = Counter()
    assert counter.config.update == counter.update
    assert counter.config.initial_model == counter.provide_initial_model


def test_helper_must_implement_abstract_methods():
    class Incomplete(StoreHelper):
        def provide_initial_model(self):
            return 0

    with pytest.raises(TypeError):
        Incomplete()


@pytest.mark.asyncio
async def test_helper_runs_initial_effect_and_chained_effects():
    counter = LoadingCounter(3)
    history = []
    counter.add_listener(lambda: history.append(counter.get_model()["count"]))

    assert counter.get_model() == {"count": 0}
    await counter.store.join()

    assert counter.get_model() == {"count": 0}
    assert history == [3, 2, 1, 0]


def test_store_config_builds_a_store_from_provider():
    config = StoreConfig(initial_model=lambda: 5, update=counter_update)
    first = config.build()
    second = config.build()

    first.dispatch(increment())
    assert first.get_model() == 6
    assert second.get_model() == 5


def test_store_config_rejects_non_callables():
    with pytest.raises(pydantic.ValidationError):
        StoreConfig(initial_model=lambda: 0, update=3)


def test_store_config_is_frozen():
    config = StoreConfig(initial_model=lambda: 0, update=counter_update)
    with pytest.raises(pydantic.ValidationError):
        config.update = counter_update


def test_create_store_with_reducer(counter_reducer):
    store = create_store(counter_reducer.initial_state, counter_reducer)
    store.dispatch(increment())
    store.dispatch(increment())
    store.dispatch(decrement())
    assert store.get_model() == 1


def test_create_store_calls_model_provider_once():
    calls = []

    def provide():
        calls.append(1)
        return 5

    store = create_store(provide, counter_update)
    store.dispatch(increment())

    assert store.get_model() == 6
    assert calls == [1]


def test_create_store_accepts_plain_model_value():
    store = create_store({"count": 0}, dict_counter_update)
    store.dispatch(increment())
    assert store.get_model() == {"count": 1}
