"""Download artefacts built straight from an AggregateResult."""
import json
from typing import NamedTuple

from core.response_parser import AggregateResult
from core.tabular_parser import TabularParser


class Export(NamedTuple):
    filename: str
    media_type: str
    content: str


def cleaned_csv(result: AggregateResult) -> Export:
    return Export('cleaned_data.csv', 'text/csv', TabularParser.serialize(result.cleaning.updated_data))


def model_info_json(result: AggregateResult) -> Export:
    m = result.model
    info = {
        'type': m.type,
        'features': m.features,
        'metrics': m.metrics.model_dump(exclude_unset=True),
        'code': m.code,
    }
    return Export('model_info.json', 'application/json', json.dumps(info, indent=2))


def model_script(result: AggregateResult) -> Export:
    return Export('model_script.py', 'text/x-python', result.model.code)


EXPORTERS = {
    'cleaned-data': cleaned_csv,
    'model-info': model_info_json,
    'model-script': model_script,
}
