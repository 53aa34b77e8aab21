from pystorelite import StoreHelper

from counter_effects import counter_effect, load_initial_count
from counter_reducers import CounterState, counter_reducer


class CounterStore(StoreHelper[CounterState, object]):
    def provide_initial_model(self):
        return counter_reducer.initial_state

    def update(self, model, action):
        return counter_reducer(model, action)

    async def run_initial_effect(self, model):
        return await load_initial_count(model)

    async def run_effect(self, model, action):
        return await counter_effect(model, action)
