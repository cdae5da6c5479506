"""Response schemas and the validator that turns raw completion text into them.

Every public parse method returns a well-typed object. Anything that fails to
decode or validate is logged and replaced by the kind-specific fallback, so the
orchestrator never sees a schema error.
"""
from __future__ import annotations
import json, logging, re
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from core.tabular_parser import Dataset

logger = logging.getLogger(__name__)

CLEANING_ERROR_STEP = 'Error processing data cleaning instructions'
VISUALIZATION_ERROR_LABEL = 'Error loading data'
MODEL_ERROR_TYPE = 'error'
MODEL_ERROR_CODE = '# Error generating model recommendation'


# ── Schemas ───────────────────────────────────────────────────────────────────
class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)


class CleaningResult(_Schema):
    steps: List[str]
    updated_data: List[List[str]] = Field(alias='updatedData')


class ChartDataset(_Schema):
    # Styling keys (backgroundColor, borderColor, ...) pass through untouched.
    model_config = ConfigDict(extra='allow', coerce_numbers_to_str=True)
    label: Optional[str] = None
    # Plain values or chart.js point objects ({"x": .., "y": ..}).
    data: List[Union[float, Dict[str, Any], None]]


class ChartConfig(_Schema):
    # options, plugins and other chart.js keys are kept as sent.
    model_config = ConfigDict(extra='allow', coerce_numbers_to_str=True)
    labels: List[str]
    datasets: List[ChartDataset]


class LineChart(_Schema):
    type: Literal['line']
    config: ChartConfig


class BarChart(_Schema):
    type: Literal['bar']
    config: ChartConfig


VisualizationSpec = Annotated[Union[LineChart, BarChart], Field(discriminator='type')]
_visualization_adapter = TypeAdapter(VisualizationSpec)


class ModelMetrics(BaseModel):
    # Metrics beyond the three named ones (f1_score, rmse, ...) are kept.
    model_config = ConfigDict(extra='allow')
    accuracy: Optional[float] = None
    r2_score: Optional[float] = None
    cross_validation: Optional[List[float]] = None


class SerializedModel(BaseModel):
    joblib: str = ''
    pickle: str = ''


class ModelRecommendation(_Schema):
    type: str
    features: List[str]
    metrics: ModelMetrics
    code: str
    serialized_model: Optional[SerializedModel] = Field(default=None, alias='serializedModel')


class AggregateResult(_Schema):
    cleaning: CleaningResult
    visualization: VisualizationSpec
    model: ModelRecommendation

    def to_response(self) -> dict:
        return self.model_dump(mode='json', by_alias=True, exclude_unset=True)


# ── Fallbacks ─────────────────────────────────────────────────────────────────
def cleaning_fallback(original: Dataset) -> CleaningResult:
    return CleaningResult(steps=[CLEANING_ERROR_STEP], updated_data=[list(r) for r in original])


def visualization_fallback() -> BarChart:
    return BarChart(type='bar', config=ChartConfig(
        labels=[], datasets=[ChartDataset(label=VISUALIZATION_ERROR_LABEL, data=[])]))


def model_fallback() -> ModelRecommendation:
    return ModelRecommendation(type=MODEL_ERROR_TYPE, features=[], metrics=ModelMetrics(),
                               code=MODEL_ERROR_CODE, serialized_model=SerializedModel())


# ── Parser ────────────────────────────────────────────────────────────────────
_FENCE_RE = re.compile(r'^\s*```(?:json)?\s*([\s\S]*?)\s*```\s*$')
# ValidationError and JSONDecodeError are ValueErrors; deeply nested input hits RecursionError.
_PARSE_ERRORS = (ValueError, TypeError, RecursionError)


class ResponseParser:
    __slots__ = ()

    @staticmethod
    def decode(raw: str) -> Any:
        """Strict JSON decode; a single wrapping code fence is the only tolerated noise."""
        if not isinstance(raw, str):
            raise TypeError(f"expected text, got {type(raw).__name__}")
        if not raw or not raw.strip():
            raise ValueError("empty response")
        m = _FENCE_RE.match(raw)
        return json.loads(m.group(1) if m else raw)

    def cleaning(self, raw: str, original: Dataset) -> CleaningResult:
        try:
            return CleaningResult.model_validate(self.decode(raw))
        except _PARSE_ERRORS as e:
            self._log_failure('cleaning', raw, e)
            return cleaning_fallback(original)

    def visualization(self, raw: str) -> Union[LineChart, BarChart]:
        try:
            return _visualization_adapter.validate_python(self.decode(raw))
        except _PARSE_ERRORS as e:
            self._log_failure('visualization', raw, e)
            return visualization_fallback()

    def model(self, raw: str) -> ModelRecommendation:
        try:
            return ModelRecommendation.model_validate(self.decode(raw))
        except _PARSE_ERRORS as e:
            self._log_failure('model', raw, e)
            return model_fallback()

    @staticmethod
    def _log_failure(kind: str, raw: str, err: Exception):
        reason = 'schema mismatch' if isinstance(err, ValidationError) else 'invalid JSON'
        logger.warning(f"{kind}: {reason}, using fallback ({str(err)[:200]})")
        logger.info(f"{kind}: raw response was {str(raw)[:500]!r}")
