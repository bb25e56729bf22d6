from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

SCORING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "scoring.yaml"


class ScoringConfigError(RuntimeError):
    pass


def load_scoring_config(path: Path) -> dict[str, Any]:
    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ScoringConfigError(f"Unable to read scoring config '{path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise ScoringConfigError(f"Invalid YAML in scoring config '{path}': {exc}") from exc

    if not isinstance(parsed, dict):
        raise ScoringConfigError(f"Scoring config '{path}' must be a mapping at the top level.")
    return parsed


@lru_cache(maxsize=1)
def get_scoring_config() -> dict[str, Any]:
    """Weights, heuristic points and grade bands from config/scoring.yaml, read once."""
    return load_scoring_config(SCORING_CONFIG_PATH)


def get_scoring_value(path: str, default: Any = None) -> Any:
    """Dot-path lookup such as ``weights.role_aware.keyword``; ``default`` when any hop is missing."""
    node: Any = get_scoring_config()
    for part in path.split(".") if path else ():
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node if path else default
