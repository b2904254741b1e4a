"""Reference material lookup for prompt enrichment."""

import logging
from dataclasses import dataclass
from typing import Protocol

_logger = logging.getLogger(__name__)

MAX_REFERENCE_CHARS = 2000
ANALYSIS_TYPES: tuple[str, ...] = ("FOOD", "EXAMS", "BODY_PHOTOS")


class ReferenceRepository(Protocol):
    """Persistence interface for admin-curated reference materials."""

    def list_active_materials(self) -> list[dict[str, object]]:
        """Return active materials with title and content_text."""


@dataclass
class ReferenceService:
    """Appends curated reference material to analysis prompts."""

    repository: ReferenceRepository

    def enrich_prompt(self, base_prompt: str, analysis_type: str) -> str:
        """Return the prompt with a reference block appended when available."""
        if analysis_type not in ANALYSIS_TYPES:
            raise ValueError(f"Unknown analysis type: {analysis_type}")
        try:
            materials = self.repository.list_active_materials()
        except Exception:
            _logger.exception(
                "Failed to load reference materials",
                extra={"analysis_type": analysis_type},
            )
            return base_prompt
        block = build_reference_block(materials)
        if not block:
            return base_prompt
        return f"{base_prompt}\n\n{block}"


def build_reference_block(materials: list[dict[str, object]]) -> str:
    """Format materials, stopping once the character budget is used."""
    entries = []
    used = 0
    included = 0
    for material in materials:
        content = str(material.get("content_text") or "").strip()
        if not content:
            continue
        title = str(material.get("title") or "Untitled")
        entry = f"### {title}\n{content}"
        if used + len(entry) > MAX_REFERENCE_CHARS:
            remaining = MAX_REFERENCE_CHARS - used
            if remaining > len(title) + 10:
                entries.append(entry[:remaining] + "...")
                included += 1
            break
        entries.append(entry)
        used += len(entry)
        included += 1
    if not entries:
        return ""
    usable = [m for m in materials if str(m.get("content_text") or "").strip()]
    omitted = len(usable) - included
    lines = ["REFERENCE MATERIALS:", *entries]
    if omitted > 0:
        lines.append(f"({omitted} more reference materials omitted)")
    lines.append("Use these references to support your analysis where relevant.")
    return "\n\n".join(lines)
