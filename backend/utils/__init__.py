from utils.data_validator import DataValidator
from utils.dependencies import get_orchestrator

__all__ = [
    "DataValidator",
    "get_orchestrator",
]
