"""
UI 整合層使用的 Store 提供者。

StoreProvider 不依賴任何 GUI 框架，只負責：
- 延遲建立並持有同一個 Store；
- 在尚未 provide() 前讀取或分發時立即拋出 StoreNotProvidedError；
- 提供「每次渲染後同步外部輸入」的掛鉤 rerender()。
"""
from typing import Callable, Generic, Optional

from .errors import StoreNotProvidedError
from .store import Store
from .types import DispatchFunction, Listener, R, StateSelector, T, U, Unsubscribe


class StoreProvider(Generic[T, U]):
    """延遲建立 Store 並作為 UI 整合層唯一入口的持有者。"""

    def __init__(self, create_store: Callable[[], Store[T, U]]):
        """
        Args:
            create_store: 無參數的 Store 工廠，只會在第一次 provide() 時呼叫。
        """
        self._create_store = create_store
        self._store: Optional[Store[T, U]] = None

    @property
    def provided(self) -> bool:
        return self._store is not None

    def provide(self) -> Store[T, U]:
        """建立（或返回已建立的）Store。"""
        if self._store is None:
            self._store = self._create_store()
        return self._store

    def get_store(self) -> Store[T, U]:
        if self._store is None:
            raise StoreNotProvidedError("StoreProvider.provide() 尚未被呼叫", operation="get_store")
        return self._store

    def select(self, selector: StateSelector[T, R]) -> R:
        """以 selector 讀取當前模型的一部分。"""
        return selector(self.get_store().get_model())

    def subscribe(self, listener: Listener) -> Unsubscribe:
        return self.get_store().add_listener(listener)

    def dispatch(self, action: U) -> None:
        self.get_store().dispatch(action)

    def use_dispatch(self) -> DispatchFunction:
        """返回綁定到目前 Store 的 dispatch 函數。"""
        return self.get_store().dispatch

    def rerender(self, on_rerender: Optional[Callable[[T], Optional[U]]] = None) -> None:
        """
        每次渲染後呼叫，將外部輸入同步進 Store。

        on_rerender 根據當前模型計算一個 action，只要不是 None 就無條件 dispatch。
        """
        store = self.get_store()
        if on_rerender is None:
            return
        action = on_rerender(store.get_model())
        if action is not None:
            store.dispatch(action)

    def reset(self) -> None:
        """拆除目前的 Store 並忘記它，下一次 provide() 會建立新的 Store。"""
        if self._store is not None:
            self._store.teardown()
            self._store = None
