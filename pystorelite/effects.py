import asyncio
import inspect
import logging
from typing import Any, Callable, Optional, Set

from .errors import EffectError, ErrorHandler, StoreError, global_error_handler

logger = logging.getLogger(__name__)


def _effect_name(effect_fn: Callable[..., Any]) -> str:
    return getattr(effect_fn, "__qualname__", None) or repr(effect_fn)


def _action_type(action: Any) -> Optional[str]:
    if action is None:
        return None
    return str(getattr(action, "type", action))


class EffectsManager:
    """
    管理 Store 的所有副作用任務，負責排程、追蹤、等待與取消。

    每個副作用都以 asyncio.Task 執行。任務完成後若得到非 None 的 action，
    會在事件迴圈的回呼中重新 dispatch 到 Store，因此連鎖的副作用不會增加呼叫堆疊。
    """

    def __init__(self, store, error_handler: Optional[ErrorHandler] = None,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        """
        初始化 EffectsManager。

        :param store: 要接收後續 action 的 Store。
        :param error_handler: 副作用失敗時使用的錯誤處理器，預設為全域處理器。
        :param loop: 指定的事件迴圈；未指定時使用排程當下正在執行的迴圈。
        """
        self.store = store
        self.error_handler = error_handler or global_error_handler
        self._loop = loop
        self._tasks: Set[asyncio.Task] = set()
        # 每次 teardown 遞增；較舊世代的任務結果一律丟棄
        self._generation = 0

    @property
    def pending(self) -> int:
        """尚未完成的副作用任務數量。"""
        return len(self._tasks)

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            raise StoreError(
                "沒有正在執行的事件迴圈，無法排程副作用；請在 asyncio 迴圈內建立並使用 Store，或傳入 loop",
                operation="schedule_effect",
            ) from None

    def launch(self, effect_fn: Callable[..., Any], *args: Any, action: Any = None) -> asyncio.Task:
        """
        排程一個副作用。

        :param effect_fn: 副作用函數，可以是協程函數或一般函數。
        :param args: 傳給副作用函數的參數。
        :param action: 觸發此副作用的 action，只用於錯誤記錄。
        :return: 代表此副作用的 asyncio.Task。
        """
        loop = self._get_loop()
        name = _effect_name(effect_fn)
        task = loop.create_task(self._run(effect_fn, name, args, action))
        self._tasks.add(task)
        generation = self._generation
        task.add_done_callback(lambda done: self._on_done(done, generation))
        logger.debug("已排程副作用 %s (action=%s)", name, _action_type(action))
        return task

    async def _run(self, effect_fn: Callable[..., Any], name: str, args: tuple, action: Any) -> Any:
        try:
            result = effect_fn(*args)
            if inspect.isawaitable(result):
                result = await result
        except Exception as err:
            error = EffectError(
                f"副作用 {name} 執行失敗: {err}",
                effect_name=name,
                action_type=_action_type(action),
            )
            error.__cause__ = err
            self.error_handler.handle(error)
            return None
        return result

    def _on_done(self, task: asyncio.Task, generation: int) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug("副作用任務已取消: %r", task)
            return
        next_action = task.result()
        if generation != self._generation:
            # 任務在 teardown 前已完成但回呼尚未執行
            logger.debug("丟棄 teardown 前的副作用結果: %r", next_action)
            return
        if next_action is not None:
            self.store.dispatch(next_action)

    async def join(self) -> None:
        """
        等待所有副作用完成，包括完成過程中連鎖產生的新副作用。
        """
        while self._tasks:
            # asyncio.wait 不會在 join 被取消時連帶取消副作用
            await asyncio.wait(list(self._tasks))

    def teardown(self) -> None:
        """
        取消所有尚未完成的副作用。被取消的副作用不會再 dispatch 任何 action，
        已完成但結果尚未套用的副作用也一併丟棄。teardown 之後排程的副作用照常執行。
        """
        self._generation += 1
        for task in list(self._tasks):
            task.cancel()
