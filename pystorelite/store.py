import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, Optional

import reactivex
from pydantic import BaseModel, ConfigDict
from reactivex import Observable, operators as ops
from reactivex.disposable import Disposable

from .effects import EffectsManager
from .errors import ConfigurationError, ErrorHandler
from .types import (
    EffectFunction, InitialEffectFunction, Listener, StateSelector, T, U,
    Unsubscribe, UpdateFunction,
)

logger = logging.getLogger(__name__)


def _check_callable(value: Any, key: str, optional: bool = False) -> None:
    if value is None and optional:
        return
    if not callable(value):
        raise ConfigurationError(f"{key} 必須是可調用物件，收到 {value!r}", component="Store", config_key=key)


class Store(Generic[T, U]):
    """
    狀態容器，持有單一模型並在每次 dispatch 時同步更新與通知訂閱者。

    dispatch 分為兩段：
    - 同步段：以轉換函數計算新模型、取代舊模型、排程副作用，再依序呼叫所有監聽器。
    - 非同步段：副作用在 dispatch 返回後才以新模型與觸發的 action 執行，
      其結果若不是 None 會再次被 dispatch。
    """

    def __init__(
        self,
        initial_model: T,
        update: UpdateFunction,
        effect: Optional[EffectFunction] = None,
        initial_effect: Optional[InitialEffectFunction] = None,
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        error_handler: Optional[ErrorHandler] = None,
    ):
        """
        初始化 Store。

        Args:
            initial_model: 初始模型。
            update: 轉換函數 (model, action) -> model，必須是純函數。
            effect: 每次 dispatch 後執行的副作用 (model, action) -> action | None。
            initial_effect: 建構時執行一次的副作用 (model) -> action | None。
            loop: 排程副作用使用的事件迴圈，預設為當下正在執行的迴圈。
            error_handler: 副作用失敗時使用的錯誤處理器。
        """
        _check_callable(update, "update")
        _check_callable(effect, "effect", optional=True)
        _check_callable(initial_effect, "initial_effect", optional=True)

        self._model = initial_model
        self._update = update
        self._effect = effect
        # dict 作為有序集合，重複註冊同一監聽器只保留一份
        self._listeners: Dict[Listener, None] = {}
        self._effects_manager = EffectsManager(self, error_handler=error_handler, loop=loop)

        if initial_effect is not None:
            self._effects_manager.launch(initial_effect, initial_model)

    @property
    def model(self) -> T:
        """當前模型的快照。"""
        return self._model

    def get_model(self) -> T:
        """
        獲取當前模型。

        Returns:
            最近一次轉換的結果，尚未 dispatch 時為初始模型。
        """
        return self._model

    def dispatch(self, action: U) -> None:
        """
        分發一個動作。

        轉換函數拋出的異常會直接傳給呼叫者，此時模型保持不變，也不會通知監聽器。
        副作用在通知監聽器之前排程，監聽器拋出異常不影響副作用；
        副作用本身要等事件迴圈下一輪才開始執行。

        Args:
            action: 要分發的動作。
        """
        next_model = self._update(self._model, action)
        self._model = next_model
        logger.debug("dispatch %r -> %r", action, next_model)

        if self._effect is not None:
            self._effects_manager.launch(self._effect, next_model, action, action=action)

        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            # 通知過程中被取消訂閱的監聽器不再呼叫
            if listener in self._listeners:
                listener()

    def add_listener(self, listener: Listener) -> Unsubscribe:
        """
        註冊一個無參數的監聽器，每次 dispatch 完成後呼叫一次。

        Args:
            listener: 監聽器。

        Returns:
            取消訂閱函數，重複呼叫不會有額外效果。
        """
        _check_callable(listener, "listener")
        self._listeners[listener] = None
        removed = False

        def unsubscribe() -> None:
            nonlocal removed
            if removed:
                return
            removed = True
            self._listeners.pop(listener, None)

        return unsubscribe

    subscribe = add_listener

    def select(self, selector: Optional[StateSelector] = None) -> Observable:
        """
        選擇模型的一部分進行觀察。

        訂閱時立即發出當前值，之後只在選擇的值改變時發出。

        Args:
            selector: 接收模型並返回希望觀察的部分，預設為整個模型。

        Returns:
            一個可觀察對象。
        """
        def on_subscribe(observer, scheduler=None):
            observer.on_next(self._model)
            unsubscribe = self.add_listener(lambda: observer.on_next(self._model))
            return Disposable(unsubscribe)

        source = reactivex.create(on_subscribe)
        if selector is None:
            return source.pipe(ops.distinct_until_changed())
        return source.pipe(ops.map(selector), ops.distinct_until_changed())

    @property
    def pending_effects(self) -> int:
        """尚未完成的副作用數量。"""
        return self._effects_manager.pending

    async def join(self) -> None:
        """等待所有副作用（包含連鎖產生的副作用）完成。"""
        await self._effects_manager.join()

    def teardown(self) -> None:
        """
        取消所有進行中的副作用並移除所有監聽器。

        未呼叫 teardown 時，副作用一律會完成並套用結果。
        """
        self._effects_manager.teardown()
        self._listeners.clear()

    def __enter__(self) -> "Store[T, U]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.teardown()


def create_store(
    initial_model: T,
    update: UpdateFunction,
    effect: Optional[EffectFunction] = None,
    initial_effect: Optional[InitialEffectFunction] = None,
    **store_kwargs: Any,
) -> Store[T, U]:
    """
    創建一個新的 Store 實例。

    Args:
        initial_model: 初始模型，或無參數的模型提供者（可調用時只呼叫一次）。

    Returns:
        Store: 新創建的 Store 實例。
    """
    if callable(initial_model):
        initial_model = initial_model()
    return Store(initial_model, update, effect=effect, initial_effect=initial_effect, **store_kwargs)


class StoreConfig(BaseModel):
    """
    Store 的四個回呼函數組成的配置記錄。

    initial_model 是無參數的模型提供者，每次 build 時呼叫一次。
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    initial_model: Callable[[], Any]
    update: Callable[[Any, Any], Any]
    initial_effect: Optional[Callable[[Any], Any]] = None
    effect: Optional[Callable[[Any, Any], Any]] = None

    def build(self, **store_kwargs: Any) -> Store:
        """根據配置建立一個 Store，store_kwargs 會傳給 Store 建構子。"""
        return Store(
            self.initial_model(),
            self.update,
            effect=self.effect,
            initial_effect=self.initial_effect,
            **store_kwargs,
        )


class StoreHelper(ABC, Generic[T, U]):
    """
    以子類別方式定義 Store 的工具類。

    子類別實作 provide_initial_model 與 update，需要時再覆寫
    run_initial_effect 與 run_effect。建立實例時會用綁定後的方法同步建立一個 Store。

    範例:
        class Counter(StoreHelper[int, str]):
            def provide_initial_model(self):
                return 0

            def update(self, model, action):
                return model + 1 if action == "increment" else model

        counter = Counter()
        counter.dispatch("increment")
    """

    def __init__(self, **store_kwargs: Any):
        self.config = StoreConfig(
            initial_model=self.provide_initial_model,
            update=self.update,
            # 未覆寫的鉤子不傳入，純同步的 Store 不需要事件迴圈
            initial_effect=self.run_initial_effect if self._overrides("run_initial_effect") else None,
            effect=self.run_effect if self._overrides("run_effect") else None,
        )
        self.store: Store[T, U] = self.config.build(**store_kwargs)

    def _overrides(self, name: str) -> bool:
        return getattr(type(self), name) is not getattr(StoreHelper, name)

    @abstractmethod
    def provide_initial_model(self) -> T:
        ...

    @abstractmethod
    def update(self, model: T, action: U) -> T:
        ...

    async def run_initial_effect(self, model: T) -> Optional[U]:
        return None

    async def run_effect(self, model: T, action: U) -> Optional[U]:
        return None

    def get_model(self) -> T:
        return self.store.get_model()

    def dispatch(self, action: U) -> None:
        self.store.dispatch(action)

    def add_listener(self, listener: Listener) -> Unsubscribe:
        return self.store.add_listener(listener)
