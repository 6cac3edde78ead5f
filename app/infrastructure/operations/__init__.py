"""Operation result types and status enums.

Standardized result types for delivery provider calls and health checks,
plus the classifier that maps HTTP failures onto them.
"""

from infrastructure.operations.classifiers import classify_http_error
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_http_error",
]
