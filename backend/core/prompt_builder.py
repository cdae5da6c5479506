"""PromptBuilder — renders the three fixed instruction prompts from a data sample."""
from typing import Dict, List, Optional

from core.tabular_parser import Dataset, TabularParser

# ── Model catalogue ───────────────────────────────────────────────────────────
MODEL_TYPES: Dict[str, List[str]] = {
    'regression': [
        'Linear Regression',
        'Decision Tree Regression',
        'Random Forest Regression',
        'Gradient Boosting Regression',
        'Support Vector Regression',
    ],
    'classification': [
        'Logistic Regression',
        'Decision Tree Classifier',
        'Random Forest Classifier',
        'Support Vector Classifier',
        'Naive Bayes Classifier',
        'Gradient Boosting Classifier',
        'KNN Classifier',
    ],
}

# ── System roles ──────────────────────────────────────────────────────────────
CLEANING_SYSTEM = 'You are a data cleaning assistant. Always respond with valid JSON only, no other text.'
VISUALIZATION_SYSTEM = 'generate visualization according to the dataset'
MODEL_SYSTEM = 'You are a machine learning assistant. Always respond with valid JSON only, no other text.'

# Only the model request overrides the service's sampling defaults.
MODEL_TEMPERATURE = 0.7
MODEL_MAX_TOKENS = 4000

_JSON_ONLY = 'Do not include any other text or explanation in your response, only the JSON object.'


class PromptBuilder:
    __slots__ = ()

    def cleaning(self, data: Dataset) -> str:
        return f"""Given this dataset:
{TabularParser.sample_text(data)}

You must respond with valid JSON only, in exactly this format:
{{
  "steps": ["step1", "step2"],
  "updatedData": [[]]
}}

{_JSON_ONLY}"""

    def visualization(self, data: Dataset, task: str = "") -> str:
        return f"""Given this dataset and task: "{task}"
{TabularParser.sample_text(data)}

You must respond with valid JSON only, in exactly this format:
{{
  "type": "bar",
  "config": {{
    "labels": [],
    "datasets": []
  }}
}}

{_JSON_ONLY}"""

    def model(self, data: Dataset, task: str = "", selected_model: Optional[str] = None) -> str:
        chosen = f"Using the specified model: {selected_model}" if selected_model else ""
        return f"""Given this dataset and task: "{task}"
{TabularParser.sample_text(data)}
{chosen}

You must respond with valid JSON only, in exactly this format:
{{
  "type": "string",
  "features": ["feature1"],
  "metrics": {{
    "accuracy": 0.95,
    "r2_score": 0.85,
    "cross_validation": [0.94, 0.95, 0.96]
  }},
  "code": "give whole python script over here with saving model in joblib and pickle format"
}}

Include a complete, production-ready Python script in the code field that includes:
1. All necessary imports
2. Data preprocessing
3. Feature selection
4. Model training with cross-validation
5. Model evaluation

{_JSON_ONLY}"""
