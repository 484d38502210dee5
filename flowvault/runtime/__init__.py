from flowvault.runtime.context import ContextStore
from flowvault.runtime.engine import FlowRuntime
from flowvault.runtime.error_handler import ErrorClassifier, ErrorContext
from flowvault.runtime.logger import ExecutionLogger

__all__ = ["ContextStore", "FlowRuntime", "ErrorClassifier", "ErrorContext", "ExecutionLogger"]
