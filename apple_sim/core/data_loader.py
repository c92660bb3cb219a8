"""Load scenario definitions from YAML or JSON files."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from pydantic import ValidationError as ModelValidationError

from ..models.scenario import ScenarioSet
from .scenario_generator import build_scenario
from .validator import ValidationError

LOGGER = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Represents the outcome of a scenario file load."""

    scenario_set: ScenarioSet
    source: Path


class ScenarioLoader:
    """Read a scenario document and build a :class:`ScenarioSet`.

    The document is either a single scenario mapping or a mapping with a
    ``scenarios`` list. Missing fields fall back to the base case defaults.
    """

    suffixes = {".yaml", ".yml", ".json"}

    def load(self, file_path: Union[str, Path]) -> LoadResult:
        path = Path(file_path)
        document = self._read(path)
        scenario_set = self.build(document)
        LOGGER.info("Loaded %d scenario(s) from %s", len(scenario_set.scenarios), path)
        return LoadResult(scenario_set=scenario_set, source=path)

    def build(self, document: Any) -> ScenarioSet:
        """Convert a parsed document into a scenario set."""
        if not isinstance(document, dict):
            raise ValidationError("Scenario document must be a mapping.")
        entries: List[Dict[str, Any]]
        if "scenarios" in document:
            entries = document["scenarios"] or []
            if not isinstance(entries, list):
                raise ValidationError("'scenarios' must be a list.")
        else:
            entries = [document]
        if not entries:
            raise ValidationError("Scenario document contains no scenarios.")

        scenario_set = ScenarioSet()
        for position, entry in enumerate(entries, start=1):
            if not isinstance(entry, dict):
                raise ValidationError(f"Scenario #{position} must be a mapping.")
            try:
                scenario = build_scenario(entry, scenario_id=position)
                scenario_set.add(scenario)
            except ModelValidationError as exc:
                errors = {
                    ".".join(str(part) for part in err["loc"]): err["msg"]
                    for err in exc.errors()
                }
                raise ValidationError(
                    f"Scenario #{position} is malformed: {exc.error_count()} error(s)",
                    errors,
                ) from exc
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc
        return scenario_set

    def _read(self, path: Path) -> Any:
        if path.suffix.lower() not in self.suffixes:
            raise ValidationError(
                f"Unsupported scenario file type {path.suffix!r}; use YAML or JSON."
            )
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ValidationError(f"File not found: {path}") from exc
        try:
            if path.suffix.lower() == ".json":
                return json.loads(text)
            return yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ValidationError(f"Unable to parse {path.name}: {exc}") from exc


__all__ = ["LoadResult", "ScenarioLoader"]
