from typing import Any, Callable, Dict

from .types import T

ActionHandler = Callable[[T, Any], T]


def _action_type(action: Any) -> Any:
    # 字串本身即可作為動作類型
    if isinstance(action, str):
        return action
    return getattr(action, "type", None)


def create_reducer(initial_state: T, *handlers) -> Callable[[T, Any], T]:
    """
    創建一個轉換函數 (model, action) -> model。

    未註冊的 action 類型一律返回原狀態，因此得到的函數對所有 action 都有定義。

    Args:
        initial_state: 初始狀態，會掛在返回函數的 ``initial_state`` 屬性上。
        *handlers: 一系列 (action_type, handler_fn) 元組或使用 on 函式創建的處理器。

    Returns:
        一個 reducer 函式，根據 action 的類型執行對應的處理邏輯。
    """
    action_handlers: Dict[Any, ActionHandler] = {}

    for handler in handlers:
        if isinstance(handler, tuple) and len(handler) == 2:
            action_type, handler_fn = handler
            action_handlers[action_type] = handler_fn
        elif isinstance(handler, dict):
            action_handlers.update(handler)
        else:
            raise TypeError(f"無法識別的處理器: {handler!r}")

    def reducer(state: T, action: Any) -> T:
        handler = action_handlers.get(_action_type(action))
        if handler:
            return handler(state, action)
        return state

    reducer.initial_state = initial_state  # type: ignore[attr-defined]
    reducer.handlers = action_handlers  # type: ignore[attr-defined]
    return reducer


def on(action_creator_or_type, handler: ActionHandler) -> Dict[Any, ActionHandler]:
    """
    登記一個處理器，供 create_reducer 組合使用。

    鍵值取自 create_action 生成器的 ``type``，否則把參數本身轉成字串；
    因此同一個處理器既能匹配 Action 物件，也能匹配直接 dispatch 的字串。

    >>> reducer = create_reducer(0, on("inc", lambda n, _: n + 1))
    >>> reducer(0, "inc"), reducer(0, "other")
    (1, 0)
    """
    key = getattr(action_creator_or_type, "type", None)
    if not callable(action_creator_or_type) or key is None:
        key = str(action_creator_or_type)
    return {key: handler}
