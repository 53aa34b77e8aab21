"""
PyStoreLite：單向資料流的最小狀態容器。

一個 Store 持有一個模型，以純函數的轉換函數處理 action，
並可在每次轉換後執行非同步副作用，其產生的 action 會自動再次 dispatch。
"""
from .errors import (
    PyStoreLiteError, EffectError, StoreError, StoreNotProvidedError,
    ConfigurationError, ErrorHandler, global_error_handler,
)
from .actions import Action, create_action
from .reducers import create_reducer, on
from .effects import EffectsManager
from .store import Store, StoreConfig, StoreHelper, create_store
from .provider import StoreProvider
from .immutable_utils import to_immutable, to_dict

__all__ = [
    # Errors
    "PyStoreLiteError", "EffectError", "StoreError", "StoreNotProvidedError",
    "ConfigurationError", "ErrorHandler", "global_error_handler",

    # Actions
    "Action", "create_action",

    # Reducers
    "create_reducer", "on",

    # Effects
    "EffectsManager",

    # Store
    "Store", "StoreConfig", "StoreHelper", "create_store",

    # Provider
    "StoreProvider",

    # Immutable Utils
    "to_immutable", "to_dict",
]
