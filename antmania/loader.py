"""
Map and configuration loader.

Builds a World from map text (one colony per line, `name dir=target ...`)
and loads simulation configuration from YAML, validated against the JSON
schema shipped in antmania/schemas/.
"""

import yaml
import json
from pathlib import Path
from typing import Optional, Union
import jsonschema

from .world import World
from .data_types import Direction, SimulationConfig
from .constants import EDGE_SEPARATOR


SCHEMA_DIR = Path(__file__).parent / "schemas"


class DataLoadError(Exception):
    """Raised when data loading or validation fails"""
    pass


class MapParseError(DataLoadError):
    """Raised when a map line is malformed"""

    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


def read_config_yaml(file_path: Path) -> Optional[dict]:
    """
    Parse a YAML config file.

    Returns None for an empty file. Read and parse failures become
    DataLoadError so the CLI reports them like map errors.
    """
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        text = file_path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise DataLoadError(f"Cannot read config {file_path}: {e}")

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DataLoadError(f"YAML parse error in {file_path}: {e}")


def check_config_schema(data, schema_path: Path, config_path: Path):
    """
    Check parsed config data against the config JSON schema.

    The error names the offending key when the failure is below the top level.
    """
    try:
        schema = json.loads(schema_path.read_text(encoding='utf-8'))
    except OSError as e:
        raise DataLoadError(f"Schema not found: {schema_path} ({e})")
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON schema {schema_path}: {e}")

    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        key = ".".join(str(part) for part in e.absolute_path)
        where = f" at {key!r}" if key else ""
        raise DataLoadError(f"Validation error in {config_path}{where}: {e.message}")


# ============================================================================
# Map Loading
# ============================================================================

def parse_map(text: str) -> World:
    """
    Build a World from map text.

    Each non-blank line is `<name> [<direction>=<target>]*`. Colonies are
    created in first-seen order, whether they appear as a line's source or
    as an edge target.

    Args:
        text: Raw map contents

    Returns:
        Populated World

    Raises:
        MapParseError: edge token without '=', unknown direction, or a
            second edge in the same direction from the same colony
    """
    world = World()

    for line_number, line in enumerate(text.splitlines(), start=1):
        parts = line.split()
        if not parts:
            continue

        colony_id = world.get_or_add_colony(parts[0])

        for token in parts[1:]:
            direction_token, sep, target_name = token.partition(EDGE_SEPARATOR)
            if not sep:
                raise MapParseError(f"Invalid direction format: {token!r}", line_number)

            try:
                direction = Direction.parse(direction_token)
            except ValueError as e:
                raise MapParseError(str(e), line_number)

            if world.has_direction(colony_id, direction):
                raise MapParseError(
                    f"Duplicate direction {direction.value!r} for colony {parts[0]!r}",
                    line_number
                )

            target_id = world.get_or_add_colony(target_name)
            world.add_direction(colony_id, direction, target_id)

    return world


def load_map(file_path: Union[str, Path]) -> World:
    """Load map file from disk and build the World"""
    file_path = Path(file_path)
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        text = file_path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise DataLoadError(f"Cannot read map {file_path}: {e}")

    return parse_map(text)


# ============================================================================
# Config Loading
# ============================================================================

def load_config(file_path: Union[str, Path], schema_dir: Optional[Path] = SCHEMA_DIR) -> SimulationConfig:
    """
    Load simulation config from YAML.

    Missing keys fall back to the defaults in constants.py. An empty file
    yields the default config.
    """
    file_path = Path(file_path)
    data = read_config_yaml(file_path)
    if data is None:
        data = {}

    if schema_dir:
        schema_path = Path(schema_dir) / "simulation_config.schema.json"
        check_config_schema(data, schema_path, file_path)

    try:
        return SimulationConfig(**data)
    except (TypeError, ValueError) as e:
        raise DataLoadError(f"Invalid config {file_path}: {e}")
