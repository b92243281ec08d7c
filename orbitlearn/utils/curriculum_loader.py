"""
Curriculum loader utility for OrbitLearn.

Loads YAML curriculum files (the group dependency graph plus content
definitions) and validates them into a Curriculum.
"""

from pathlib import Path
from typing import Any
import yaml

from pydantic import ValidationError

from orbitlearn.classroom.errors import CurriculumError
from orbitlearn.classroom.graph import validate_curriculum
from orbitlearn.schemas import Curriculum


# Bundled curricula (inside the package)
CURRICULA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_CURRICULUM_PATH = CURRICULA_DIR / "curriculum.yaml"


def parse_curriculum(raw: dict[str, Any]) -> Curriculum:
    """
    Validate an already-parsed curriculum document.

    The YAML layout keys groups by ID:

        groups:
          basics: {prerequisites: [], item_count: 5, ...}
          dom: {prerequisites: [basics], item_count: 4, ...}

    A list of group mappings with an `id` field is accepted as well.

    Raises:
        CurriculumError: If the document is malformed or the graph is cyclic
    """
    if not isinstance(raw, dict):
        raise CurriculumError("Curriculum must be a mapping")

    data = dict(raw)
    groups = data.get("groups")
    if isinstance(groups, dict):
        data["groups"] = [
            {"id": group_id, **(definition or {})}
            for group_id, definition in groups.items()
        ]

    try:
        curriculum = Curriculum.model_validate(data)
    except ValidationError as e:
        raise CurriculumError(f"Invalid curriculum: {e}") from e
    return validate_curriculum(curriculum)


def load_curriculum(path: Path | None = None) -> Curriculum:
    """
    Load a curriculum YAML file.

    Args:
        path: Optional curriculum file (default: bundled curriculum.yaml)

    Returns:
        Validated Curriculum

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If YAML parsing fails
        CurriculumError: If the content is not a valid curriculum
    """
    file_path = Path(path) if path else DEFAULT_CURRICULUM_PATH

    if not file_path.exists():
        raise FileNotFoundError(f"Curriculum file not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    return parse_curriculum(raw)


def get_available_curricula(curricula_dir: Path | None = None) -> list[str]:
    """
    List curriculum files in a directory.

    Returns:
        Curriculum names (without .yaml extension)
    """
    dir_path = curricula_dir or CURRICULA_DIR
    if not dir_path.exists():
        return []
    return sorted(p.stem for p in dir_path.glob("*.yaml"))
