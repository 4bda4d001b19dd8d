"""Prompt templates and digest export."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, TypeAdapter

from dirdigest.config import DIRDIGEST_TEMPLATES_PATH
from dirdigest.exceptions import EmptyDigestError
from dirdigest.schemas import IngestResult
from dirdigest.utils.logging_config import get_logger

logger = get_logger(__name__)

PLACEHOLDER = "{SOURCE_CODE}"


class PromptTemplate(BaseModel):
    """Named text wrapped around the digest."""

    name: str = "Default"
    content: str = PLACEHOLDER


_TEMPLATE_LIST = TypeAdapter(list[PromptTemplate])


def default_templates() -> list[PromptTemplate]:
    """Return the built-in templates."""
    return [
        PromptTemplate(name="Raw Code", content=PLACEHOLDER),
        PromptTemplate(
            name="Explain Code",
            content=(
                "Here is the source code of a project:\n\n"
                "====================================\n"
                f"{PLACEHOLDER}\n"
                "====================================\n\n"
                "Please explain the architecture and key flows of this application."
            ),
        ),
        PromptTemplate(
            name="Refactor Request",
            content=(
                "I need to refactor the following code:\n\n"
                f"{PLACEHOLDER}\n\n"
                "Please identify code smells and suggest improvements."
            ),
        ),
    ]


def load_templates(path: Path = DIRDIGEST_TEMPLATES_PATH) -> list[PromptTemplate]:
    """Load templates, falling back to the built-ins when missing or unparsable."""
    if not path.exists():
        return default_templates()
    try:
        return _TEMPLATE_LIST.validate_json(path.read_text(encoding="utf-8"))
    # ValueError covers pydantic.ValidationError and UnicodeDecodeError.
    except (OSError, ValueError) as exc:
        logger.debug("Using default templates", extra={"path": str(path), "error": str(exc)})
        return default_templates()


def save_templates(templates: list[PromptTemplate], path: Path = DIRDIGEST_TEMPLATES_PATH) -> None:
    """Write templates as indented JSON. Failures are logged, not raised."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(_TEMPLATE_LIST.dump_json(templates, indent=2))
    except OSError as exc:
        logger.warning("Failed to save templates", extra={"path": str(path), "error": str(exc)})


def upsert_template(templates: list[PromptTemplate], name: str, content: str) -> PromptTemplate:
    """Update the template called ``name`` in place, or append a new one.

    Raises:
        ValueError: If ``name`` is blank.
    """
    if not name.strip():
        raise ValueError("Template name cannot be empty")
    for template in templates:
        if template.name == name:
            template.content = content
            return template
    template = PromptTemplate(name=name, content=content)
    templates.append(template)
    return template


def apply_template(template: PromptTemplate | None, digest: str) -> str:
    """Substitute ``digest`` for the placeholder in ``template``."""
    if template is None:
        return digest
    return template.content.replace(PLACEHOLDER, digest)


def default_export_filename(now: datetime | None = None) -> str:
    """Return ``digest_<MMdd>_<HHmm>.txt`` for ``now``."""
    now = now or datetime.now()
    return f"digest_{now:%m%d_%H%M}.txt"


def export_digest(
    result: IngestResult,
    destination: Path,
    *,
    template: PromptTemplate | None = None,
) -> Path:
    """Write the template-substituted digest to a text file.

    Args:
        result: Rendered ingestion result.
        destination: Target file, or a directory to create a default-named file in.
        template: Optional template wrapped around the digest.

    Returns:
        Path of the written file.

    Raises:
        EmptyDigestError: If the result failed or holds no files.
    """
    if not result.is_success or result.file_count == 0:
        raise EmptyDigestError("Nothing to export: the digest contains no files")

    if destination.is_dir():
        destination = destination / default_export_filename()
    destination.write_text(apply_template(template, result.digest), encoding="utf-8")
    logger.info("Digest exported", extra={"path": str(destination)})
    return destination
