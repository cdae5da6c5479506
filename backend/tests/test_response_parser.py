import json

from core.response_parser import (ResponseParser, CleaningResult, LineChart, BarChart,
                                  ModelRecommendation, cleaning_fallback)
from tests.conftest import CLEANING_JSON, VISUALIZATION_JSON, MODEL_JSON

parser = ResponseParser()


def test_cleaning_parses_valid_json(dataset):
    out = parser.cleaning(json.dumps(CLEANING_JSON), dataset)
    assert out == CleaningResult.model_validate(CLEANING_JSON)
    assert out.updated_data == [["a", "b"], ["1", "2"]]


def test_malformed_cleaning_returns_fallback(dataset):
    out = parser.cleaning("Sure! Here are the steps: ...", dataset)
    assert out.steps == ["Error processing data cleaning instructions"]
    assert out.updated_data == dataset


def test_missing_field_triggers_full_fallback(dataset):
    out = parser.cleaning(json.dumps({"steps": ["only steps"]}), dataset)
    assert out == cleaning_fallback(dataset)


def test_numeric_cells_become_strings(dataset):
    out = parser.cleaning(json.dumps({"steps": [], "updatedData": [["a"], [1.5]]}), dataset)
    assert out.updated_data == [["a"], ["1.5"]]


def test_code_fence_is_tolerated(dataset):
    raw = "```json\n" + json.dumps(CLEANING_JSON) + "\n```"
    assert parser.cleaning(raw, dataset).steps == CLEANING_JSON["steps"]


def test_visualization_variants():
    line = parser.visualization(json.dumps(VISUALIZATION_JSON))
    assert isinstance(line, LineChart)
    assert line.config.labels == ["1", "3"]
    assert line.config.datasets[0].data == [2.0, 4.0]
    # Chart styling keys survive validation.
    assert line.config.datasets[0].model_dump()["borderColor"] == "#3b82f6"

    bar = parser.visualization(json.dumps({"type": "bar", "config": {"labels": [], "datasets": []}}))
    assert isinstance(bar, BarChart)


def test_unsupported_chart_kind_falls_back():
    out = parser.visualization(json.dumps({"type": "pie", "config": {"labels": [], "datasets": []}}))
    assert isinstance(out, BarChart)
    assert out.config.labels == []
    assert out.config.datasets[0].label == "Error loading data"
    assert out.config.datasets[0].data == []


def test_model_parses_optional_metrics():
    out = parser.model(json.dumps(MODEL_JSON))
    assert out == ModelRecommendation.model_validate(MODEL_JSON)
    assert out.metrics.accuracy is None
    assert out.metrics.cross_validation == [0.8, 0.82, 0.9]
    assert out.serialized_model is None


def test_model_fallback_on_bad_payload():
    for raw in ["", "   ", "[1, 2]", '{"type": "x"}', "not json"]:
        out = parser.model(raw)
        assert out.type == "error"
        assert out.features == []
        assert out.metrics.model_dump(exclude_none=True) == {}
        assert out.code == "# Error generating model recommendation"


def test_chart_options_and_unlabelled_datasets_round_trip():
    payload = {
        "type": "bar",
        "config": {
            "labels": ["a"],
            "datasets": [{"data": [1]}],
            "options": {"responsive": True, "plugins": {"legend": {"display": False}}},
        },
    }
    out = parser.visualization(json.dumps(payload))
    assert isinstance(out, BarChart)
    assert out.model_dump(mode='json', by_alias=True, exclude_unset=True) == payload


def test_point_data_is_accepted():
    payload = {
        "type": "line",
        "config": {"labels": [], "datasets": [{"label": "y by x", "data": [{"x": 1, "y": 2}, None, 3]}]},
    }
    out = parser.visualization(json.dumps(payload))
    assert isinstance(out, LineChart)
    assert out.config.datasets[0].data == [{"x": 1, "y": 2}, None, 3.0]


def test_extra_metrics_are_kept():
    payload = dict(MODEL_JSON, metrics={"accuracy": 0.9, "f1_score": 0.88})
    out = parser.model(json.dumps(payload))
    assert out.metrics.model_dump(exclude_unset=True) == {"accuracy": 0.9, "f1_score": 0.88}


def test_non_text_payload_falls_back(dataset):
    content_parts = [{"type": "text", "text": "{}"}]
    assert parser.cleaning(content_parts, dataset) == cleaning_fallback(dataset)
    assert isinstance(parser.visualization(content_parts), BarChart)
    assert parser.model(content_parts).type == "error"


def test_deeply_nested_json_falls_back(dataset):
    nested = "[" * 100000
    assert parser.cleaning(nested, dataset) == cleaning_fallback(dataset)
    assert parser.model(nested).type == "error"
