import json
import threading

import pytest

from core.completion_client import CompletionClient
from core.errors import CompletionError
from core.prompt_builder import CLEANING_SYSTEM, VISUALIZATION_SYSTEM, MODEL_SYSTEM

KIND_BY_SYSTEM = {
    CLEANING_SYSTEM: 'cleaning',
    VISUALIZATION_SYSTEM: 'visualization',
    MODEL_SYSTEM: 'model',
}

CLEANING_JSON = {
    "steps": ["Trim whitespace", "Drop empty rows"],
    "updatedData": [["a", "b"], ["1", "2"]],
}
VISUALIZATION_JSON = {
    "type": "line",
    "config": {
        "labels": ["1", "3"],
        "datasets": [{"label": "b", "data": [2, 4], "borderColor": "#3b82f6"}],
    },
}
MODEL_JSON = {
    "type": "Random Forest Regression",
    "features": ["a"],
    "metrics": {"r2_score": 0.85, "cross_validation": [0.8, 0.82, 0.9]},
    "code": "import joblib\nprint('train')",
}


class StubClient(CompletionClient):
    """In-memory completion client keyed by request kind.

    A response value that is an Exception instance is raised instead of returned.
    """

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.calls = []
        self._lock = threading.Lock()

    @property
    def model_name(self):
        return "stub-model"

    def complete(self, system, prompt, temperature=None, max_tokens=None):
        kind = KIND_BY_SYSTEM[system]
        with self._lock:
            self.calls.append({'kind': kind, 'prompt': prompt,
                               'temperature': temperature, 'max_tokens': max_tokens})
        resp = self.responses.get(kind, CompletionError("no stubbed response"))
        if isinstance(resp, BaseException):
            raise resp
        return resp


@pytest.fixture
def dataset():
    return [["a", "b"], ["1", "2"], ["3", "4"]]


@pytest.fixture
def good_client():
    return StubClient({
        'cleaning': json.dumps(CLEANING_JSON),
        'visualization': json.dumps(VISUALIZATION_JSON),
        'model': json.dumps(MODEL_JSON),
    })


@pytest.fixture
def failing_client():
    return StubClient({
        'cleaning': CompletionError("Empty response from completion service"),
        'visualization': CompletionError("Completion service status 500: boom"),
        'model': CompletionError("Completion request timed out after 60s"),
    })
