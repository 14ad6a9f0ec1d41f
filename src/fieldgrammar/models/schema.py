"""Schema container and JSON schema files.

A schema file is a JSON object ``{"name": ..., "fields": [...], "version": ...}``.
Unknown top-level keys are ignored so files exported by other tools still load.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from ..exceptions import ConstructionError
from .fields import describe_validation_error
from .nodes import Node

SCHEMA_FILE_VERSION = "1"


class Schema(BaseModel):
    """An ordered, named list of top-level nodes with unique names.

    Example:
        >>> from fieldgrammar.models.fields import BoolField, IntField
        >>> schema = Schema.create("Device", [IntField("id", 0, 1000), BoolField("enabled")])
        >>> [field.name for field in schema.fields]
        ['id', 'enabled']
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str
    fields: list[Node]
    version: str = SCHEMA_FILE_VERSION

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @model_validator(mode="after")
    def _check_names(self) -> Schema:
        seen: set[str] = set()
        for field in self.fields:
            if field.name in seen:
                raise ValueError(f"Schema {self.name}: duplicate field name '{field.name}'")
            seen.add(field.name)
        return self

    @classmethod
    def create(cls, name: str, fields: Sequence[Node]) -> Schema:
        """Build a schema, raising ConstructionError on invalid fields."""
        try:
            return cls(name=name, fields=list(fields))
        except ValidationError as err:
            raise ConstructionError(describe_validation_error(err)) from err

    @classmethod
    def from_json(cls, text: str | bytes) -> Schema:
        """Parse a JSON schema file.

        Raises:
            ConstructionError: If the document is not valid JSON or a node is invalid
        """
        try:
            return cls.model_validate_json(text)
        except ValidationError as err:
            raise ConstructionError(describe_validation_error(err)) from err

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize to the JSON schema file format (camelCase attribute names)."""
        return self.model_dump_json(by_alias=True, indent=indent)


def load_schema(path: str | Path) -> Schema:
    """Read a JSON schema file from disk."""
    return Schema.from_json(Path(path).read_text(encoding="utf-8"))


def save_schema(schema: Schema, path: str | Path) -> None:
    """Write a schema to disk as a JSON schema file."""
    Path(path).write_text(schema.to_json() + "\n", encoding="utf-8")
