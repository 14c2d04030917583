"""File-backed store for OpenAPI spec sources, keyed by spec id."""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from openapi_tryout.parser.base import OpenApiDocument
from openapi_tryout.parser.openapi import parse_document

logger = logging.getLogger(__name__)

SPEC_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class StoredSpec(BaseModel):
    """A spec as saved by the user: raw YAML/JSON text plus metadata."""

    id: str
    title: str
    content: str
    version: str = ""
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class SpecStore:
    """One JSON record per spec under `root_dir`."""

    def __init__(self, root_dir: Path):
        self.root_dir = Path(root_dir)

    def _path_for(self, spec_id: str) -> Path:
        if not SPEC_ID_PATTERN.match(spec_id):
            raise ValueError(f"Invalid spec id: {spec_id!r}")
        return self.root_dir / f"{spec_id}.json"

    def save_spec(self, spec: StoredSpec) -> StoredSpec:
        """Insert or replace a spec. `created_at` is kept on replace."""
        path = self._path_for(spec.id)
        existing = self.get_spec(spec.id)
        if existing is not None:
            spec = spec.model_copy(update={"created_at": existing.created_at, "updated_at": _now()})

        self.root_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(spec.model_dump_json(indent=2), encoding="utf-8")
        logger.debug("Saved spec %s to %s", spec.id, path)
        return spec

    def get_spec(self, spec_id: str) -> StoredSpec | None:
        path = self._path_for(spec_id)
        if not path.exists():
            return None
        try:
            return StoredSpec.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError:
            logger.warning("Ignoring corrupt spec record %s", path)
            return None

    def list_specs(self) -> list[StoredSpec]:
        """All readable specs, most recently updated first."""
        if not self.root_dir.exists():
            return []
        specs = []
        for path in sorted(self.root_dir.glob("*.json")):
            if not SPEC_ID_PATTERN.match(path.stem):
                continue
            spec = self.get_spec(path.stem)
            if spec is not None:
                specs.append(spec)
        return sorted(specs, key=lambda s: s.updated_at, reverse=True)

    def delete_spec(self, spec_id: str) -> bool:
        path = self._path_for(spec_id)
        if not path.exists():
            return False
        path.unlink()
        return True


def parse_stored(stored: StoredSpec) -> OpenApiDocument:
    """Parse a stored spec's content. Raises SpecLoadError on bad content."""
    return parse_document(stored.content)
