# src/core/classifier.py

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import requests
from pydantic import ValidationError

from src.config import PREDICTION_URL, REQUEST_TIMEOUT
from src.core.data_models import PredictionResult
from src.core.errors import MalformedResponseError, describe_failure, translate_request_error
from src.core.state import Error, FetchState, Success

logger = logging.getLogger(__name__)

NO_FILE_MESSAGE = "Please select an audio file first"


def parse_prediction(payload: Any) -> PredictionResult:
    """
    Reads {"prediction": str, "confidence": number} from the server response.

    Raises:
        MalformedResponseError: if either field is missing or has the wrong type.
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError("prediction response is not an object")
    label = payload.get("prediction")
    confidence = payload.get("confidence")
    if not isinstance(label, str):
        raise MalformedResponseError("missing 'prediction'")
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise MalformedResponseError("missing 'confidence'")
    try:
        return PredictionResult(label=label, confidence=confidence)
    except ValidationError as e:
        raise MalformedResponseError(str(e)) from e


def format_confidence(result: PredictionResult) -> str:
    return f"{result.confidence * 100:.2f}%"


class PredictionClient:
    """Uploads audio files to the classification server's /predict endpoint."""

    def __init__(self, url: str = PREDICTION_URL, session: Optional[requests.Session] = None,
                 timeout: float = REQUEST_TIMEOUT):
        self.url = url
        self.session = session or requests.Session()
        self.timeout = timeout

    def predict_file(self, path) -> PredictionResult:
        path = Path(path)
        logger.info("Uploading %s to %s", path.name, self.url)
        try:
            with open(path, "rb") as audio:
                files = {"file": (path.name, audio, "audio/wav")}
                response = self.session.post(self.url, files=files, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise translate_request_error(e) from e
        except ValueError as e:
            raise MalformedResponseError(str(e)) from e
        return parse_prediction(payload)

    def predict_bytes(self, data: bytes, filename: str = "audio.wav") -> PredictionResult:
        """Copies the upload to a temporary .wav file and sends that."""
        fd, tmp_path = tempfile.mkstemp(prefix="audio", suffix=".wav")
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(data)
            result = self.predict_file(tmp_path)
        finally:
            os.remove(tmp_path)
        logger.info("Prediction for %s: %s (%.3f)", filename, result.label, result.confidence)
        return result


def classify_upload(client: PredictionClient, data: Optional[bytes], filename: str = "audio.wav") -> FetchState:
    """Uploads a selected file and returns Success(PredictionResult) or Error(message)."""
    if not data:
        return Error(NO_FILE_MESSAGE)
    try:
        return Success(client.predict_bytes(data, filename))
    except Exception as e:
        logger.exception("Prediction request failed")
        return Error(describe_failure(e))
