from core.tabular_parser import TabularParser
from core.prompt_builder import PromptBuilder, MODEL_TYPES
from core.completion_client import CompletionClient, ChatCompletionClient, LLMSettings, create_client
from core.response_parser import ResponseParser, AggregateResult
from core.orchestrator import Orchestrator
from core.errors import CompletionError, EmptyDatasetError, ProcessingError

__all__ = [
    "TabularParser",
    "PromptBuilder",
    "MODEL_TYPES",
    "CompletionClient",
    "ChatCompletionClient",
    "LLMSettings",
    "create_client",
    "ResponseParser",
    "AggregateResult",
    "Orchestrator",
    "CompletionError",
    "EmptyDatasetError",
    "ProcessingError",
]
