"""LLM completion interface and response parsing helpers."""

import base64
import json
import re
from typing import Protocol


class AnalysisError(RuntimeError):
    """Raised when an LLM response cannot be turned into a result."""


class CompletionClient(Protocol):
    """Interface for text and vision completions."""

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        image_data_url: str | None = None,
        json_output: bool = True,
    ) -> str:
        """Return the raw text produced by the model."""


_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_BARE_KEY_RE = re.compile(r"([{,])\s*(\w+)\s*:")


def parse_json_response(text: str) -> dict[str, object]:
    """Extract a JSON object from free-form model output.

    Markdown fences are stripped and the outermost ``{...}`` block is used when
    the model wraps the object in prose. Single quotes and unquoted keys are
    repaired once before giving up.
    """
    if not text or not text.strip():
        raise AnalysisError("Empty model response")
    cleaned = text.strip()
    fenced = _FENCE_RE.search(cleaned)
    if fenced:
        cleaned = fenced.group(1).strip()
    if not (cleaned.startswith("{") and cleaned.endswith("}")):
        match = _OBJECT_RE.search(cleaned)
        if match is None:
            raise AnalysisError("No JSON object found in model response")
        cleaned = match.group(0)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        repaired = _BARE_KEY_RE.sub(r'\1"\2":', cleaned.replace("'", '"'))
        try:
            parsed = json.loads(repaired)
        except json.JSONDecodeError as exc:
            raise AnalysisError(f"Invalid JSON in model response: {exc}") from exc

    if not isinstance(parsed, dict):
        raise AnalysisError("Model response is not a JSON object")
    return parsed


def to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"


def extension_for(image_bytes: bytes) -> str:
    """Return a file extension matching the detected image type."""
    return detect_mime_type(image_bytes).split("/", maxsplit=1)[1].replace(
        "jpeg", "jpg"
    )
