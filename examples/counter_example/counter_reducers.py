from typing import Optional

from pydantic import BaseModel, ConfigDict
from pystorelite import create_reducer, on

from counter_actions import (
    decrement,
    increment,
    load_count_failure,
    load_count_request,
    load_count_success,
    sync,
)


# ====== Model Definition ======
class CounterState(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int = 0
    loading: bool = False
    error: Optional[str] = None


# ====== Reducer ======
counter_reducer = create_reducer(
    CounterState(),
    on(increment, lambda state, _: state.model_copy(update={"count": state.count + 1})),
    on(decrement, lambda state, _: state.model_copy(update={"count": state.count - 1})),
    on(sync, lambda state, action: state.model_copy(update={"count": action.payload})),
    on(load_count_request, lambda state, _: state.model_copy(update={"loading": True, "error": None})),
    on(load_count_success, lambda state, action: state.model_copy(update={"loading": False, "count": action.payload})),
    on(load_count_failure, lambda state, action: state.model_copy(update={"loading": False, "error": action.payload})),
)
