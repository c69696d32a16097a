"""Typed access to raw request fields."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from .errors import FieldDecodeError
from .schema import ACCESS_TOKEN_SCHEMA, FieldSchema
from .utils.timestamps import parse_timestamp

_int_adapter = TypeAdapter(int)
_str_adapter = TypeAdapter(str)
_str_list_adapter = TypeAdapter(List[str])


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    return errors[0]["msg"] if errors else str(exc)


def _decode_comma_string_slice(raw: Any) -> List[str]:
    if isinstance(raw, str):
        raw = raw.split(",")
    values = _str_list_adapter.validate_python(raw)
    return [v.strip() for v in values if v.strip()]


def decode_value(name: str, schema: FieldSchema, raw: Any) -> Any:
    """Decode ``raw`` into the Python type declared by ``schema``."""
    try:
        if schema.type == "int":
            if isinstance(raw, bool):
                raise ValueError("Input should be a valid integer, got a boolean")
            return _int_adapter.validate_python(raw)
        if schema.type == "string":
            return _str_adapter.validate_python(raw)
        if schema.type == "comma_string_slice":
            return _decode_comma_string_slice(raw)
        if schema.type == "time":
            return parse_timestamp(raw)
    except ValidationError as e:
        raise FieldDecodeError(name, _first_error(e)) from e
    except ValueError as e:
        raise FieldDecodeError(name, str(e)) from e
    raise ValueError(f"Unsupported field type: {schema.type}")


class FieldData:
    """Raw request fields paired with the schema used to decode them."""

    def __init__(
        self,
        raw: Optional[Mapping[str, Any]] = None,
        schema: Optional[Dict[str, FieldSchema]] = None,
    ) -> None:
        self.raw: Dict[str, Any] = dict(raw or {})
        self.schema = schema if schema is not None else ACCESS_TOKEN_SCHEMA

    def _field_schema(self, key: str) -> FieldSchema:
        try:
            return self.schema[key]
        except KeyError:
            raise KeyError(f"field '{key}' is not defined in the schema") from None

    def get_ok(self, key: str) -> Tuple[Any, bool]:
        """Return ``(value, True)`` if ``key`` was supplied, else ``(None, False)``.

        Raises:
            KeyError: ``key`` is not part of the schema.
            FieldDecodeError: the supplied value does not match the field type.
        """
        field_schema = self._field_schema(key)
        raw = self.raw.get(key)
        if raw is None:
            return None, False
        return decode_value(key, field_schema, raw), True

    def get(self, key: str, default: Any = None) -> Any:
        value, ok = self.get_ok(key)
        return value if ok else default
