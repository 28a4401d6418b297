import pytest
from pydantic import ValidationError

from image_labeler.core.env import LabelerConfig
from image_labeler.core.models import (
    ClassificationCandidate,
    ClassificationErrorKind,
    ClassificationOutcome,
    RankedResult,
)


def test_candidates_and_results_are_immutable() -> None:
    candidate = ClassificationCandidate(label="cat", confidence=0.5)
    result = RankedResult(label="cat", percentage=50)
    with pytest.raises(ValidationError):
        candidate.label = "dog"
    with pytest.raises(ValidationError):
        result.percentage = 10
    assert str(result) == "cat (50%)"


def test_outcome_failure_helper() -> None:
    outcome = ClassificationOutcome.failure(
        ClassificationErrorKind.NO_RESULTS, "No results found", photo_id="p", model="m"
    )
    assert not outcome.ok
    assert outcome.total == 0
    assert outcome.model_dump(mode="json")["error"] == {
        "kind": "no_results",
        "message": "No results found",
    }


def test_config_defaults() -> None:
    config = LabelerConfig.from_env()
    assert config.base_url == "http://localhost:11434"
    assert config.vision_model is None
    assert config.timeout == 60.0
    assert config.max_candidates == 5
    assert config.top_n == 3
    assert config.image_max_size == 512
    assert config.live_min_interval == 0.5


def test_config_from_env(monkeypatch) -> None:
    monkeypatch.setenv("OLLAMA_VISION_MODEL", "llava:13b")
    monkeypatch.setenv("LABELER_TOP_N", "5")
    monkeypatch.setenv("LIVE_MIN_INTERVAL", "1.25")
    config = LabelerConfig.from_env()
    assert config.vision_model == "llava:13b"
    assert config.top_n == 5
    assert config.live_min_interval == 1.25
