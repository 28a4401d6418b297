from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

from image_labeler.core.env import LabelerConfig, configure_logging, load_dotenv_if_present
from image_labeler.core.models import ClassificationErrorKind, ClassificationOutcome
from image_labeler.ingest import photo_from_path
from image_labeler.vision import classify_image, classify_photo
from image_labeler.vision.model_client import ClassifierBackend, ModelLoadError, build_backend

app = FastAPI(title="Image Labeler API")

load_dotenv_if_present()
configure_logging()

config = LabelerConfig.from_env()
backend: Optional[ClassifierBackend]
try:
    backend = build_backend(config)
except ModelLoadError:
    backend = None

_ERROR_STATUS = {
    ClassificationErrorKind.INVALID_IMAGE: 422,
    ClassificationErrorKind.MODEL_UNAVAILABLE: 503,
    ClassificationErrorKind.INFERENCE_FAILED: 502,
}


class ClassifyRequest(BaseModel):
    path: str
    top_n: Optional[int] = None


def _respond(outcome: ClassificationOutcome, top_n: Optional[int]) -> dict:
    if outcome.error and outcome.error.kind in _ERROR_STATUS:
        raise HTTPException(
            status_code=_ERROR_STATUS[outcome.error.kind],
            detail={"kind": outcome.error.kind.value, "message": outcome.error.message},
        )
    limit = top_n if top_n is not None else config.top_n
    return {
        "photo_id": outcome.photo_id,
        "model": outcome.model,
        "results": [result.model_dump() for result in outcome.top(limit)],
        "total": outcome.total,
        "error": outcome.error.model_dump(mode="json") if outcome.error else None,
    }


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "model": backend.name if backend else None}


@app.post("/classify")
async def classify(req: ClassifyRequest) -> dict:
    path = Path(req.path).expanduser()
    if not path.is_file():
        raise HTTPException(status_code=404, detail="Photo not found")
    photo = photo_from_path(path)
    outcome = await classify_photo(photo, backend, max_size=config.image_max_size)
    return _respond(outcome, req.top_n)


@app.post("/classify/upload")
async def classify_upload(request: Request, top_n: Optional[int] = None) -> dict:
    """Classify raw image bytes sent as the request body."""
    body = await request.body()
    if not body:
        raise HTTPException(status_code=400, detail="Empty request body")
    outcome = await classify_image(body, backend, max_size=config.image_max_size)
    return _respond(outcome, top_n)
