from __future__ import annotations

import base64
import json
import logging
import re
from typing import Any, List, Optional, Protocol

import httpx
from pydantic import BaseModel, Field, ValidationError, field_validator

from image_labeler.core.env import LabelerConfig
from image_labeler.core.models import ClassificationCandidate

logger = logging.getLogger(__name__)


class LocalModelError(RuntimeError):
    """Raised when a local model call fails."""


class ModelLoadError(LocalModelError):
    """The classification model is not configured or not available on the server."""


class InferenceError(LocalModelError):
    """The model was reachable but the inference call or its output failed."""


class ClassifierBackend(Protocol):
    name: str

    def classify(self, image: bytes) -> List[ClassificationCandidate]: ...


_CLASSIFIER_PROMPT = """
You are an image classifier. Return structured JSON only.

Identify what the image shows and return the {count} most likely labels.
Confidences must form a probability distribution: each between 0 and 1,
all of them together summing to at most 1.

Rules:
- Use lowercase, 1–3 word labels naming the main subject (e.g. "golden retriever").
- Order labels from most to least likely.
- Never add markdown, prose, or explanations.

Required JSON shape:
{{
  "labels": [ {{ "label": "tabby cat", "confidence": 0.72 }}, ... ]
}}
""".strip()


def build_prompt(max_candidates: int) -> str:
    return _CLASSIFIER_PROMPT.format(count=max_candidates)


def _normalize_label(label: str) -> Optional[str]:
    """Lower-case, collapse whitespace and underscores; drop empty or numeric labels."""
    value = label.strip().strip("`").strip("{}[]\"'")
    value = re.sub(r"[_]", " ", value)
    value = re.sub(r"\s+", " ", value).strip().lower()
    if not value:
        return None
    if re.fullmatch(r"\d+(\.\d+)?", value):
        return None
    if len(value) > 40:
        value = value[:40].rstrip()
    return value


def _normalize_conf(value: Any) -> Optional[float]:
    try:
        conf = float(value)
    except (TypeError, ValueError):
        return None
    if not 0 <= conf <= 1:
        return None
    return conf


class _LabelEntry(BaseModel):
    label: str
    confidence: float

    @field_validator("label")
    @classmethod
    def _norm_label(cls, v: str) -> str:
        normalized = _normalize_label(v)
        if not normalized:
            raise ValueError("empty label")
        return normalized

    @field_validator("confidence", mode="before")
    @classmethod
    def _norm_conf(cls, v: Any) -> float:
        conf = _normalize_conf(v)
        if conf is None:
            raise ValueError("invalid confidence")
        return conf


class _LabelResponse(BaseModel):
    labels: List[Any] = Field(default_factory=list)

    def entries(self) -> List[_LabelEntry]:
        valid: List[_LabelEntry] = []
        for item in self.labels:
            try:
                valid.append(_LabelEntry.model_validate(item))
            except ValidationError:
                logger.debug("Dropping malformed label entry: %r", item)
        return valid


def _strip_wrappers(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        parts = text.split("\n", 1)
        text = parts[1] if len(parts) > 1 else ""
    if text.endswith("```"):
        text = text.rsplit("```", 1)[0]
    return text.strip()


def parse_candidates(raw: str, max_candidates: int = 5) -> List[ClassificationCandidate]:
    """
    Parse model output into candidates.

    Drops malformed entries and duplicate labels, keeps the `max_candidates`
    most confident, and rescales confidences that sum above 1.
    Raises InferenceError when the output is not a JSON label object.
    """
    text = _strip_wrappers(raw)
    if not text:
        raise InferenceError("Empty response from vision model")

    parsed: Any = None
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        match = re.search(r"\{.*\}", text, flags=re.DOTALL)
        if match:
            try:
                parsed = json.loads(match.group(0))
            except json.JSONDecodeError:
                parsed = None

    if not isinstance(parsed, dict):
        raise InferenceError(f"Unparseable vision model output: {raw[:200]!r}")
    try:
        response = _LabelResponse.model_validate(parsed)
    except ValidationError as exc:
        raise InferenceError(f"Vision model output has the wrong shape: {exc}") from exc

    seen: set[str] = set()
    entries: List[_LabelEntry] = []
    for entry in response.entries():
        if entry.label in seen:
            continue
        seen.add(entry.label)
        entries.append(entry)

    entries.sort(key=lambda entry: entry.confidence, reverse=True)
    entries = entries[:max_candidates]

    total = sum(entry.confidence for entry in entries)
    scale = 1.0 / total if total > 1 else 1.0
    if scale != 1.0:
        logger.debug("Rescaling %d confidences summing to %.3f", len(entries), total)
    return [
        ClassificationCandidate(label=entry.label, confidence=entry.confidence * scale)
        for entry in entries
    ]


class OllamaClassifier:
    """Classifier backed by a vision model served from a local Ollama instance."""

    def __init__(self, config: LabelerConfig, client: Optional[httpx.Client] = None):
        if not config.vision_model:
            raise ModelLoadError("OLLAMA_VISION_MODEL not set")
        self.config = config
        self.name = config.vision_model
        self.client = client or httpx.Client(
            base_url=config.base_url.rstrip("/"), timeout=config.timeout
        )

    def _generate(self, image: bytes) -> str:
        payload = {
            "model": self.name,
            "prompt": build_prompt(self.config.max_candidates),
            "stream": False,
            "format": "json",
            "images": [base64.b64encode(image).decode("utf-8")],
        }
        try:
            response = self.client.post("/api/generate", json=payload)
        except httpx.HTTPError as exc:
            raise InferenceError(f"Model call failed: {exc}") from exc
        if response.status_code == 404:
            raise ModelLoadError(f"Model {self.name!r} not available: {response.text}")
        try:
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPStatusError, ValueError) as exc:
            raise InferenceError(f"Model call failed: {exc}") from exc

        text = data.get("response") or (data.get("message") or {}).get("content")
        if not text:
            raise InferenceError("No response text from vision model")
        return str(text)

    def classify(self, image: bytes) -> List[ClassificationCandidate]:
        raw = self._generate(image)
        logger.debug("Vision classifier raw output (%s):\n%s", self.name, raw)
        return parse_candidates(raw, max_candidates=self.config.max_candidates)


def build_backend(config: LabelerConfig | None = None) -> ClassifierBackend:
    """Create the configured classifier backend; raises ModelLoadError when none is set."""
    config = config or LabelerConfig.from_env()
    return OllamaClassifier(config)
