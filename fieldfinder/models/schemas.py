"""Pydantic models for field configuration and positioned document text."""
import re
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

# Reserved name of the synthetic search tree root
ROOT_NAME = "root"

NO_GRID = (-1, -1)

_VALUE_TYPE_PATTERN = re.compile(r"^(String|Number|Date|Table(/(String|Number|Date))?)$")
_PHONETIC_WRAPPER = re.compile(r"^soundex\((.*)\)$", re.DOTALL)
_INTEGER = re.compile(r"^\s*-?\d+\s*$")


class ValueType(str, Enum):
    """Types a found value is converted to."""
    STRING = "String"
    NUMBER = "Number"
    DATE = "Date"


def _unwrap_phonetic(value: str) -> Tuple[str, bool]:
    """Strip a ``soundex(...)`` wrapper, reporting whether it was present."""
    match = _PHONETIC_WRAPPER.match(value.strip())
    if match:
        return match.group(1), True
    return value, False


class TextUnit(BaseModel):
    """A piece of text with its position on a page."""
    text: str
    x: float
    y: float = 0.0
    page: int = 1
    # Phonetic rendition of text, filled in when a field needs it
    phonetic: Optional[str] = None


class Expression(BaseModel):
    """One step of a field's search chain.

    For table fields the parameters are (row offset, column offset), for all
    other fields (line offset, horizontal status).
    """
    pattern: str
    first_parameter: int = 0
    second_parameter: int = 0
    use_phonetic: bool = False

    @classmethod
    def parse(cls, cell: Optional[str]) -> Optional["Expression"]:
        """
        Parse an expression cell of the form ``pattern;p1;p2``.

        Trailing parts are read as parameters while they are integers or empty,
        everything before them is the pattern (which may itself contain ``;``).

        Args:
            cell: Raw cell text

        Returns:
            Expression, or None for an empty cell
        """
        if cell is None or not str(cell).strip():
            return None

        parts = str(cell).split(';')
        parameters: List[str] = []
        while len(parts) > 1 and len(parameters) < 2 and _is_parameter(parts[-1]):
            parameters.insert(0, parts.pop())
        parameters += [''] * (2 - len(parameters))

        pattern, use_phonetic = _unwrap_phonetic(';'.join(parts))
        return cls(
            pattern=pattern,
            first_parameter=_to_int(parameters[0], 0),
            second_parameter=_to_int(parameters[1], 0),
            use_phonetic=use_phonetic,
        )


def _is_parameter(value: str) -> bool:
    return not value.strip() or bool(_INTEGER.match(value))


def _to_int(value: Optional[str], default: int) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


class FieldSpec(BaseModel):
    """Declarative description of one field to find in a document."""
    name: str
    value_type: str = "String"
    text_expression: Optional[str] = None
    expected_name: Optional[str] = None
    grid_coordinates: Tuple[int, int] = NO_GRID
    use_phonetic: bool = False
    expressions: List[Expression] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("field name must not be empty")
        if value == ROOT_NAME:
            raise ValueError(f"field name '{ROOT_NAME}' is reserved")
        return value

    @field_validator("value_type")
    @classmethod
    def _check_value_type(cls, value: str) -> str:
        if not _VALUE_TYPE_PATTERN.match(value):
            raise ValueError(f"unsupported value type: {value}")
        return value

    @field_validator("expressions", mode="before")
    @classmethod
    def _parse_expression_cells(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [Expression.parse(item) if isinstance(item, str) else item for item in value]
        return value

    @field_validator("grid_coordinates", mode="before")
    @classmethod
    def _parse_grid(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return parse_grid_cell(value)
        return value

    @model_validator(mode="after")
    def _fill_defaults(self) -> "FieldSpec":
        if self.text_expression:
            self.text_expression, wrapped = _unwrap_phonetic(self.text_expression)
            self.use_phonetic = self.use_phonetic or wrapped
        else:
            self.text_expression = self.name
        if not self.expected_name:
            self.expected_name = self.name
        if not self.is_table:
            for index, expression in enumerate(self.expressions):
                if expression.second_parameter not in (-1, 0, 1):
                    raise ValueError(
                        f"horizontal status of expression {index} in field "
                        f"'{self.name}' is out of range: {expression.second_parameter}"
                    )
        return self

    @property
    def is_table(self) -> bool:
        return self.value_type.startswith("Table")

    @property
    def base_value_type(self) -> ValueType:
        """Value type used for conversion; ``Table/Number`` converts as Number."""
        if "/" in self.value_type:
            return ValueType(self.value_type.split("/", 1)[1])
        if self.is_table:
            return ValueType.STRING
        return ValueType(self.value_type)

    @property
    def has_grid_restriction(self) -> bool:
        return tuple(self.grid_coordinates) != NO_GRID

    @classmethod
    def from_cells(
        cls,
        name: str,
        value_type: str,
        text_cell: Optional[str] = None,
        grid_cell: Optional[str] = None,
        expression_cells: Iterable[Optional[str]] = ()
    ) -> "FieldSpec":
        """
        Build a field from its configuration cells.

        Args:
            name: Field name
            value_type: Value type tag
            text_cell: ``pattern;expected name`` text, optionally ``soundex(...)`` wrapped
            grid_cell: ``row,column`` grid restriction
            expression_cells: Expression cells; reading stops at the first empty one

        Returns:
            FieldSpec instance
        """
        text_expression, expected_name, use_phonetic = parse_text_cell(text_cell, name)
        expressions = []
        for cell in expression_cells:
            expression = Expression.parse(cell)
            if expression is None:
                break
            expressions.append(expression)

        return cls(
            name=name,
            value_type=value_type or "String",
            text_expression=text_expression,
            expected_name=expected_name,
            grid_coordinates=parse_grid_cell(grid_cell),
            use_phonetic=use_phonetic,
            expressions=expressions,
        )


def parse_text_cell(cell: Optional[str], name: str) -> Tuple[str, str, bool]:
    """
    Split a ``pattern;expected name`` cell.

    Extra ``;`` parts belong to the pattern. Empty parts fall back to the
    field name.

    Returns:
        Tuple of (text expression, expected name, phonetic flag)
    """
    if cell is None or not str(cell).strip():
        return name, name, False

    parts = str(cell).split(';')
    if len(parts) == 1:
        pattern, expected = parts[0], ''
    else:
        pattern, expected = ';'.join(parts[:-1]), parts[-1]

    pattern = pattern or name
    expected = expected or name
    pattern, use_phonetic = _unwrap_phonetic(pattern)
    return pattern, expected, use_phonetic


def parse_grid_cell(cell: Optional[str]) -> Tuple[int, int]:
    """Parse ``row,column``; missing or invalid parts become -1."""
    if cell is None or not str(cell).strip():
        return NO_GRID
    parts = str(cell).replace(' ', '').split(',')
    parts += [''] * (2 - len(parts))
    return _to_int(parts[0], -1), _to_int(parts[1], -1)


class FieldConfiguration(BaseModel):
    """Ordered collection of field specifications."""
    fields: List[FieldSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique_names(self) -> "FieldConfiguration":
        seen = set()
        for field in self.fields:
            if field.name in seen:
                raise ValueError(f"duplicate field name: {field.name}")
            seen.add(field.name)
        return self

    def get(self, name: str) -> Optional[FieldSpec]:
        """Get a field by name."""
        for field in self.fields:
            if field.name == name:
                return field
        return None

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[Optional[str]]]) -> "FieldConfiguration":
        """
        Build a configuration from table rows.

        Each row is ``(name, value_type, text_cell, grid_cell, *expression_cells)``;
        rows without a name are skipped.
        """
        fields = []
        for row in rows:
            row = list(row) + [None] * max(0, 4 - len(row))
            name, value_type, text_cell, grid_cell = row[:4]
            if not name:
                continue
            fields.append(FieldSpec.from_cells(name, value_type, text_cell, grid_cell, row[4:]))
        return cls(fields=fields)

    @classmethod
    def from_yaml(cls, path: str) -> "FieldConfiguration":
        """Load a configuration written as YAML (a ``fields`` list of FieldSpec mappings)."""
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)


class ExtractionResult(BaseModel):
    """Found values of one processed document."""
    document_id: str
    values: Dict[str, str] = Field(default_factory=dict)
    error: Optional[str] = None

    @property
    def is_successful(self) -> bool:
        return self.error is None

    def to_simplified_dict(self) -> Dict[str, Any]:
        """Result as a plain dictionary, without the error key when there is none."""
        simple: Dict[str, Any] = {"document_id": self.document_id, "values": dict(self.values)}
        if self.error:
            simple["error"] = self.error
        return simple


def as_field_list(fields: Any) -> List[FieldSpec]:
    """Fields of a FieldConfiguration, or the given iterable of FieldSpecs as a list."""
    if isinstance(fields, FieldConfiguration):
        return list(fields.fields)
    return list(fields)
