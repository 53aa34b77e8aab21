"""
PyStoreLite 共用類型定義模組。

集中定義各模組使用的泛型變數與回呼函數別名。
"""
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

# 模型類型
T = TypeVar("T")
# 動作類型
U = TypeVar("U")
# 負載類型
P = TypeVar("P")
# 選擇結果類型
R = TypeVar("R")

# 可能是同步值，也可能是需要 await 的值
MaybeAwaitable = Union[R, Awaitable[R]]

# (model, action) -> model
UpdateFunction = Callable[[T, U], T]
# (model, action) -> action | None，可為協程函數
EffectFunction = Callable[[T, U], MaybeAwaitable[Optional[U]]]
# (model) -> action | None，可為協程函數
InitialEffectFunction = Callable[[T], MaybeAwaitable[Optional[U]]]
# 無參數的模型提供者
ModelProvider = Callable[[], T]

Listener = Callable[[], None]
Unsubscribe = Callable[[], None]
StateSelector = Callable[[T], R]
DispatchFunction = Callable[[Any], None]
