import json
import logging
import os
from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError

from mercury_qa.exceptions import FixtureError

DEFAULT_DATA_DIR = "test_data"

ModelT = TypeVar("ModelT", bound=BaseModel)

_MISSING = object()


def resolve_path(node: Any, key_path: str, default: Any = _MISSING) -> Any:
    """Follow a dotted key path (``user.address.city``) through nested dicts.

    List elements can be addressed by index, e.g. ``items.0.name``.

    Raises:
        FixtureError: when a segment is missing and no default is given
    """
    current = node
    for segment in key_path.split("."):
        if isinstance(current, dict) and segment in current:
            current = current[segment]
        elif isinstance(current, list) and segment.isdigit() and int(segment) < len(current):
            current = current[int(segment)]
        else:
            if default is not _MISSING:
                return default
            raise FixtureError(f"Key '{segment}' not found while resolving '{key_path}'")
    return current


class DataReader:
    """Reads JSON test data relative to a base directory."""

    def __init__(self, base_dir: str = DEFAULT_DATA_DIR):
        self.base_dir = base_dir

    def _path(self, name: str) -> str:
        return os.path.join(self.base_dir, name)

    def read_as_string(self, name: str) -> str:
        path = self._path(name)
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            raise FixtureError(f"Failed to read fixture {path}: {e}") from e
        logging.info(f"Read test data file: {path}")
        return content

    def read_json(self, name: str) -> Any:
        content = self.read_as_string(name)
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise FixtureError(f"Invalid JSON in fixture {self._path(name)}: {e}") from e

    def read_as_map(self, name: str) -> Dict[str, Any]:
        data = self.read_json(name)
        if not isinstance(data, dict):
            raise FixtureError(f"Fixture {self._path(name)} is not a JSON object")
        return data

    def read_as_object(self, name: str, model: Type[ModelT]) -> ModelT:
        data = self.read_json(name)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise FixtureError(f"Fixture {self._path(name)} does not match {model.__name__}: {e}") from e

    def read_record(self, name: str, key_path: str, model: Type[ModelT]) -> ModelT:
        """Validate the sub-object at ``key_path`` into ``model``."""
        node = resolve_path(self.read_json(name), key_path)
        try:
            return model.model_validate(node)
        except ValidationError as e:
            raise FixtureError(f"'{key_path}' in {self._path(name)} does not match {model.__name__}: {e}") from e

    def get_value(self, name: str, key_path: str) -> str:
        """Return the value at a dotted key path as text."""
        value = resolve_path(self.read_json(name), key_path)
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        if isinstance(value, bool):
            return "true" if value else "false"
        return "" if value is None else str(value)

    def read_ui(self, name: str) -> Any:
        return self.read_json(f"ui/{name}")

    def read_api(self, name: str) -> Any:
        return self.read_json(f"api/{name}")
