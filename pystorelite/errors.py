"""
PyStoreLite 錯誤處理模組。

定義函式庫使用的異常類別，以及集中式的錯誤處理器。
副作用（effect）失敗時不會拋給呼叫者，而是交由錯誤處理器記錄。
"""
import logging
import traceback
from typing import Any, Callable, Dict, List, Optional, Union

logger = logging.getLogger("pystorelite")


class PyStoreLiteError(Exception):
    """所有 PyStoreLite 異常的基礎類。"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.traceback = traceback.format_exc()

    def to_dict(self) -> Dict[str, Any]:
        """
        將錯誤轉換為字典，便於記錄或上報。

        Returns:
            包含錯誤類型、訊息與細節的字典
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        if not self.details:
            return self.message
        details = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        return f"{self.message} ({details})"


class EffectError(PyStoreLiteError):
    """與 Effect 相關的錯誤，包裝副作用函數拋出的原始異常。"""

    def __init__(self, message: str, effect_name: str, action_type: Optional[str] = None, **kwargs: Any):
        details = {"effect_name": effect_name}
        if action_type is not None:
            details["action_type"] = action_type
        details.update(kwargs)
        super().__init__(message, details)
        self.effect_name = effect_name
        self.action_type = action_type


class StoreError(PyStoreLiteError):
    """與 Store 相關的錯誤，表示呼叫端的使用方式有誤。"""

    def __init__(self, message: str, operation: str, **kwargs: Any):
        super().__init__(message, {"operation": operation, **kwargs})
        self.operation = operation


class StoreNotProvidedError(StoreError):
    """在 StoreProvider.provide() 之前就讀取或分發。"""


class ConfigurationError(PyStoreLiteError):
    """配置相關的錯誤。"""

    def __init__(self, message: str, component: str, config_key: Optional[str] = None, **kwargs: Any):
        details = {"component": component}
        if config_key is not None:
            details["config_key"] = config_key
        details.update(kwargs)
        super().__init__(message, details)
        self.component = component
        self.config_key = config_key


class ErrorHandler:
    """集中式錯誤處理器，用於捕獲、日誌記錄和錯誤報告。"""

    def __init__(self, log_to_console: bool = True, log_to_file: bool = False, log_file: Optional[str] = None):
        """
        初始化錯誤處理器。

        Args:
            log_to_console: 是否透過 logging 輸出錯誤
            log_to_file: 是否額外寫入日誌檔
            log_file: 日誌檔路徑，log_to_file 為 True 時必須提供
        """
        self.log_to_console = log_to_console
        self.log_to_file = log_to_file
        self.log_file = log_file
        self.handlers: List[Callable[[PyStoreLiteError], None]] = []
        self._file_logger: Optional[logging.Logger] = None

        if log_to_file:
            if not log_file:
                raise ConfigurationError("啟用檔案日誌時必須指定 log_file", component="ErrorHandler", config_key="log_file")
            self._file_logger = logging.getLogger(f"pystorelite.errors.{id(self)}")
            self._file_logger.propagate = False
            self._file_logger.addHandler(logging.FileHandler(log_file, encoding="utf-8"))

    def register_handler(self, handler: Callable[[PyStoreLiteError], None]) -> None:
        """
        註冊額外的錯誤回呼，例如上報到外部服務。

        Args:
            handler: 接收 PyStoreLiteError 的函數
        """
        self.handlers.append(handler)

    def handle(self, error: Union[PyStoreLiteError, Exception]) -> None:
        """
        處理一個錯誤：記錄日誌並通知所有已註冊的回呼。

        一般異常會先包裝成 PyStoreLiteError。
        """
        if not isinstance(error, PyStoreLiteError):
            wrapped = PyStoreLiteError(str(error), {"original_type": type(error).__name__})
            wrapped.__cause__ = error
            error = wrapped

        cause = error.__cause__ or error
        exc_info = (type(cause), cause, cause.__traceback__)
        if self.log_to_console:
            logger.error("%s", error, exc_info=exc_info)
        if self._file_logger is not None:
            self._file_logger.error("%s", error, exc_info=exc_info)

        for handler in list(self.handlers):
            try:
                handler(error)
            except Exception:
                logger.exception("錯誤回呼 %r 執行失敗", handler)


# 單例錯誤處理器
global_error_handler = ErrorHandler()
