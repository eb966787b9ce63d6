"""Classify cleaned trends against domains of interest using Gemini."""

from __future__ import annotations

import asyncio
import json
import logging
import re
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

import orjson
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types
from pydantic import BaseModel, ConfigDict, Field
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_random_exponential,
)

from .config import Settings, settings as default_settings
from .csv_writer import read_trend_csv, trending_filename
from .normalize import TrendRecord
from .writers import to_json

logger = logging.getLogger(__name__)

UNCLASSIFIED = "Other/Unclassified"

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class EvaluationError(RuntimeError):
    """Raised when the model response cannot be interpreted."""


class DomainOfInterest(BaseModel):
    name: str
    description: str
    keywords: List[str] = Field(default_factory=list)
    examples: List[str] = Field(default_factory=list)


class DomainEvaluation(BaseModel):
    domain: str
    relevance: float = 0.0
    reasoning: str = ""
    is_match: bool = Field(default=False, alias="isMatch")

    model_config = ConfigDict(populate_by_name=True)


class EvaluationResult(BaseModel):
    trend: str
    classification: str
    confidence: float
    reasoning: str
    domain_evaluations: List[DomainEvaluation] = Field(
        default_factory=list, alias="domainEvaluations"
    )
    search_volume: str = Field(default="", alias="searchVolume")
    growth: str = ""
    time_ago: str = Field(default="", alias="timeAgo")

    model_config = ConfigDict(populate_by_name=True)


DEFAULT_DOMAINS = [
    DomainOfInterest(
        name="Technology & AI",
        description=(
            "Artificial intelligence, machine learning, software development, tech "
            "companies, programming languages, tech trends"
        ),
        keywords=["AI", "machine learning", "software", "tech", "programming", "blockchain", "crypto", "startup"],
        examples=["ChatGPT", "iPhone release", "Google AI", "Tesla", "cryptocurrency crash"],
    )
]


def load_domains(path: str | Path) -> List[DomainOfInterest]:
    """Load a JSON list of domain definitions."""
    with open(path, "r", encoding="utf-8") as f:
        return [DomainOfInterest.model_validate(d) for d in json.load(f)]


def domain_prompt(record: TrendRecord, domain: DomainOfInterest) -> str:
    return f"""
You are an expert content classifier. Evaluate how relevant this trending topic is to the given domain.

TRENDING TOPIC:
- Name: {record.trend_name}
- Search Volume: {record.search_volume}
- Growth: {record.growth_percentage}
- Related Searches: {', '.join(record.related_searches)}

DOMAIN TO EVALUATE:
- Name: {domain.name}
- Description: {domain.description}
- Keywords: {', '.join(domain.keywords)}
- Examples: {', '.join(domain.examples)}

Please provide:
1. A relevance score from 0-10 (10 = highly relevant, 0 = not relevant at all)
2. A brief explanation of your reasoning
3. Whether this is a clear match (true/false)

Respond in JSON format:
{{
  "relevance": <number>,
  "reasoning": "<explanation>",
  "isMatch": <boolean>
}}
"""


def summary_prompt(
    record: TrendRecord,
    evaluations: Sequence[DomainEvaluation],
    classification: str,
    confidence: float,
) -> str:
    lines = "\n".join(
        f"- {e.domain}: {e.relevance:g}/10 - {e.reasoning}" for e in evaluations
    )
    return f"""
Based on these domain evaluations for the trending topic "{record.trend_name}", provide a final summary:

EVALUATIONS:
{lines}

BEST MATCH: {classification} (confidence: {confidence * 100:.1f}%)

Provide a concise final reasoning (2-3 sentences) for this classification:
"""


def parse_domain_response(domain: str, text: str) -> DomainEvaluation:
    """Pull the first JSON object out of a model reply.

    Any reply that does not yield a valid evaluation raises
    :class:`EvaluationError`.
    """
    match = _JSON_OBJECT.search(text)
    if not match:
        raise EvaluationError("No JSON found in response")
    try:
        data = orjson.loads(match.group(0))
    except orjson.JSONDecodeError as exc:
        raise EvaluationError(f"Invalid JSON in response: {exc}") from exc
    if not isinstance(data, dict):
        raise EvaluationError("Response JSON is not an object")
    try:
        return DomainEvaluation(
            domain=domain,
            relevance=float(data.get("relevance") or 0),
            reasoning=data.get("reasoning") or "No reasoning provided",
            is_match=bool(data.get("isMatch") or False),
        )
    # pydantic.ValidationError is a ValueError
    except (TypeError, ValueError) as exc:
        raise EvaluationError(f"Malformed evaluation in response: {exc}") from exc


def _retryable(exc: BaseException) -> bool:
    """Return ``True`` for rate limiting and server side API errors."""
    if isinstance(exc, genai_errors.ServerError):
        return True
    return isinstance(exc, genai_errors.APIError) and exc.code == 429


class TopicEvaluator:
    """Score trend records against a list of domains of interest."""

    def __init__(
        self,
        cfg: Settings | None = None,
        domains: Sequence[DomainOfInterest] | None = None,
        client: Any = None,
    ) -> None:
        self.cfg = cfg or default_settings
        if not self.cfg.GEMINI_API_KEY:
            raise EvaluationError("GEMINI_API_KEY is not set")
        self.domains = list(domains or DEFAULT_DOMAINS)
        self.client = client or genai.Client(
            api_key=self.cfg.GEMINI_API_KEY,
            http_options=genai_types.HttpOptions(timeout=int(self.cfg.TIMEOUT_S * 1000)),
        )
        self._generate = retry(
            retry=retry_if_exception(_retryable),
            wait=wait_random_exponential(multiplier=1, max=self.cfg.RETRY_WAIT_MAX_S),
            stop=stop_after_attempt(self.cfg.RETRY_MAX),
            reraise=True,
        )(self._generate_once)

    async def _generate_once(self, prompt: str) -> str:
        response = await self.client.aio.models.generate_content(
            model=self.cfg.GEMINI_MODEL,
            contents=prompt,
        )
        text = response.text
        if not text:
            raise EvaluationError("Empty response")
        return text

    async def generate(self, prompt: str) -> str:
        """Send ``prompt`` to the model and return the reply text."""
        return await self._generate(prompt)

    async def evaluate_domain(
        self, record: TrendRecord, domain: DomainOfInterest
    ) -> DomainEvaluation:
        text = await self.generate(domain_prompt(record, domain))
        return parse_domain_response(domain.name, text)

    async def evaluate_domains(self, record: TrendRecord) -> List[DomainEvaluation]:
        evaluations: List[DomainEvaluation] = []
        for domain in self.domains:
            try:
                evaluations.append(await self.evaluate_domain(record, domain))
            except (EvaluationError, genai_errors.APIError):
                logger.exception("Error evaluating %s for %s", domain.name, record.trend_name)
                evaluations.append(
                    DomainEvaluation(
                        domain=domain.name,
                        relevance=0,
                        reasoning="Error during evaluation",
                        is_match=False,
                    )
                )
        return evaluations

    async def final_classification(
        self, record: TrendRecord, evaluations: Sequence[DomainEvaluation]
    ) -> Tuple[str, float, str]:
        """Return ``(classification, confidence, reasoning)``."""
        if not evaluations:
            return UNCLASSIFIED, 0.0, "No domains configured"
        best = max(evaluations, key=lambda e: e.relevance)
        classification = (
            best.domain if best.relevance >= self.cfg.RELEVANCE_THRESHOLD else UNCLASSIFIED
        )
        confidence = best.relevance / 10
        try:
            reasoning = (
                await self.generate(summary_prompt(record, evaluations, classification, confidence))
            ).strip()
        except (EvaluationError, genai_errors.APIError):
            logger.warning("Summary generation failed for %s", record.trend_name)
            reasoning = (
                f"Classified as {classification} based on highest relevance score "
                f"of {best.relevance:g}/10"
            )
        return classification, confidence, reasoning

    async def evaluate_trend(self, record: TrendRecord) -> EvaluationResult:
        logger.info("Evaluating: %s", record.trend_name)
        evaluations = await self.evaluate_domains(record)
        classification, confidence, reasoning = await self.final_classification(
            record, evaluations
        )
        return EvaluationResult(
            trend=record.trend_name,
            classification=classification,
            confidence=confidence,
            reasoning=reasoning,
            domain_evaluations=evaluations,
            search_volume=record.search_volume,
            growth=record.growth_percentage,
            time_ago=record.time_ago,
        )


def summarize(results: Sequence[EvaluationResult]) -> Dict[str, int]:
    """Count results per classification."""
    return dict(Counter(r.classification for r in results))


async def evaluate_topics(
    csv_path: Path,
    cfg: Settings | None = None,
    evaluator: TopicEvaluator | None = None,
    output_dir: Path | None = None,
) -> Tuple[List[EvaluationResult], Path]:
    """Evaluate every record of a trends CSV and save the results as JSON.

    A record whose evaluation fails is logged and left out of the results;
    the remaining records are still evaluated.
    """
    cfg = cfg or default_settings
    if evaluator is None:
        domains = load_domains(cfg.DOMAINS_PATH) if cfg.DOMAINS_PATH else None
        evaluator = TopicEvaluator(cfg, domains)

    records = read_trend_csv(csv_path)
    results: List[EvaluationResult] = []
    for i, record in enumerate(records):
        if i and cfg.REQUEST_DELAY_S:
            await asyncio.sleep(cfg.REQUEST_DELAY_S)
        try:
            result = await evaluator.evaluate_trend(record)
        except Exception:
            logger.exception("Evaluation failed for %s", record.trend_name)
            continue
        results.append(result)
        logger.info(
            "%s -> %s (%.1f%%)",
            result.trend,
            result.classification,
            result.confidence * 100,
        )

    out_dir = Path(output_dir or cfg.OUTPUT_DIR)
    output_path = to_json(
        results,
        out_dir / trending_filename(datetime.now(), "trend_evaluations", ".json"),
    )
    logger.info(
        "Processed %s of %s trends, results saved to %s",
        len(results),
        len(records),
        output_path,
    )
    for classification, count in summarize(results).items():
        logger.info("  %s: %s trends", classification, count)
    return results, output_path


__all__ = [
    "DEFAULT_DOMAINS",
    "DomainEvaluation",
    "DomainOfInterest",
    "EvaluationError",
    "EvaluationResult",
    "TopicEvaluator",
    "UNCLASSIFIED",
    "domain_prompt",
    "evaluate_topics",
    "load_domains",
    "parse_domain_response",
    "summarize",
]
