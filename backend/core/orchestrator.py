"""Orchestrator — fans the cleaning, visualization and model requests out in parallel."""
from __future__ import annotations
import logging, time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional

from core.completion_client import CompletionClient
from core.errors import CompletionError, EmptyDatasetError, ProcessingError
from core.prompt_builder import (PromptBuilder, CLEANING_SYSTEM, VISUALIZATION_SYSTEM, MODEL_SYSTEM,
                                 MODEL_TEMPERATURE, MODEL_MAX_TOKENS)
from core.response_parser import (ResponseParser, AggregateResult, cleaning_fallback,
                                  visualization_fallback, model_fallback)
from core.tabular_parser import Dataset

logger = logging.getLogger(__name__)


class Orchestrator:
    __slots__ = ('client', 'prompts', 'parser', 'task_latencies')

    def __init__(self, client: CompletionClient, prompts: Optional[PromptBuilder] = None,
                 parser: Optional[ResponseParser] = None):
        self.client = client
        self.prompts = prompts or PromptBuilder()
        self.parser = parser or ResponseParser()
        self.task_latencies: Dict[str, float] = {}

    # ── Public API ────────────────────────────────────────────────────────
    def process(self, data: Dataset, selected_model: Optional[str] = None,
                task: str = "") -> AggregateResult:
        """Run all three requests and return their combined result.

        Each branch converts its own remote and schema failures into fallback
        values, so the batch only fails when something escapes that handling.
        In that case a single ProcessingError is raised and no partial result
        is returned. Once submitted, all three requests run to completion.
        """
        if not data:
            raise EmptyDatasetError()

        t0 = time.time()
        # Per-call dict; concurrent batches on one instance never share it.
        latencies: Dict[str, float] = {}
        # Branches share only the read-only sample.
        with ThreadPoolExecutor(max_workers=3) as pool:
            futs = {
                'cleaning': pool.submit(self._timed, latencies, 'cleaning', self._run_cleaning, data),
                'visualization': pool.submit(self._timed, latencies, 'visualization', self._run_visualization, data, task),
                'model': pool.submit(self._timed, latencies, 'model', self._run_model, data, task, selected_model),
            }
            results = {}
            failed = None
            for k, f in futs.items():
                try:
                    results[k] = f.result()
                except Exception as e:
                    logger.error(f"Task '{k}' escaped its fallback: {e}", exc_info=True)
                    failed = failed or k

        if failed:
            raise ProcessingError(task=failed)

        latencies['total'] = round(time.time() - t0, 3)
        logger.info(f"Batch complete in {latencies['total']}s "
                    f"(model={self.client.model_name}, latencies={latencies})")
        # Latest finished batch, kept for diagnostics only.
        self.task_latencies = latencies
        return AggregateResult(cleaning=results['cleaning'], visualization=results['visualization'],
                               model=results['model'])

    # ── Pipelines ─────────────────────────────────────────────────────────
    @staticmethod
    def _timed(latencies: Dict[str, float], name: str, fn, *args):
        t0 = time.time()
        try:
            return fn(*args)
        finally:
            latencies[name] = round(time.time() - t0, 3)

    def _run_cleaning(self, data: Dataset):
        prompt = self.prompts.cleaning(data)
        try:
            raw = self.client.complete(CLEANING_SYSTEM, prompt)
        except CompletionError as e:
            logger.warning(f"cleaning: completion failed, using fallback ({e})")
            return cleaning_fallback(data)
        return self.parser.cleaning(raw, data)

    def _run_visualization(self, data: Dataset, task: str):
        prompt = self.prompts.visualization(data, task)
        try:
            raw = self.client.complete(VISUALIZATION_SYSTEM, prompt)
        except CompletionError as e:
            logger.warning(f"visualization: completion failed, using fallback ({e})")
            return visualization_fallback()
        return self.parser.visualization(raw)

    def _run_model(self, data: Dataset, task: str, selected_model: Optional[str]):
        prompt = self.prompts.model(data, task, selected_model)
        try:
            raw = self.client.complete(MODEL_SYSTEM, prompt, temperature=MODEL_TEMPERATURE,
                                       max_tokens=MODEL_MAX_TOKENS)
        except CompletionError as e:
            logger.warning(f"model: completion failed, using fallback ({e})")
            return model_fallback()
        return self.parser.model(raw)
