"""Long-running operation polling — re-export the public API."""

from .future import AsyncOperation, OperationStatus, PollingMethod, json_decoder, model_decoder
from .wait import wait_for_completion

__all__ = [
    "AsyncOperation",
    "OperationStatus",
    "PollingMethod",
    "json_decoder",
    "model_decoder",
    "wait_for_completion",
]
