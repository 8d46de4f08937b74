"""Binding validation of populated values (fields tagged binding="required")."""
import dataclasses
import logging
from typing import Any, List

from src.introspection.tags import BINDING_TAG, FORM_TAG, SKIP, json_name_of_field

logger = logging.getLogger(__name__)

_SCALARS = (bool, int, float, complex, str, bytes, list, tuple, set, frozenset, dict)


class ValidationError(ValueError):
    """A required field holds its zero value."""


def validate(obj: Any, *parents: str) -> None:
    """
    Validate input based upon the binding tags of a dataclass

    Args:
        obj: Dataclass instance or list of them
        parents: Name of the enclosing field, used in messages

    Raises:
        ValidationError: On the first required field left empty
    """
    if obj is None:
        return

    if isinstance(obj, (list, tuple)):
        for each in obj:
            validate(each)
        return

    if not dataclasses.is_dataclass(obj) or isinstance(obj, type):
        return

    for field in dataclasses.fields(obj):
        # allow ignored fields in the struct
        if field.metadata.get(FORM_TAG) == SKIP:
            continue
        if "required" not in field.metadata.get(BINDING_TAG, ""):
            continue

        value = getattr(obj, field.name)
        json_name = json_name_of_field(field.name, field.metadata)

        if _is_struct(value):
            if _is_zero(value):
                raise ValidationError(f"Required {json_name}")
            validate(value, field.name)
        elif _is_zero(value):
            if parents:
                raise ValidationError(f"Required {json_name} on {parents[0]}")
            raise ValidationError(f"Required {json_name}")
        elif isinstance(value, (list, tuple)) and value and all(_is_struct(v) for v in value):
            validate(value)


def _is_struct(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _is_zero(value: Any) -> bool:
    """True if the value equals the zero value of its type"""
    if value is None:
        return True
    if isinstance(value, _SCALARS):
        return not value
    if _is_struct(value):
        try:
            return value == type(value)()
        except TypeError:
            # no zero value can be constructed
            return False
    return False


class DataValidator:
    """Validates populated values against their binding tags."""

    def validate(self, obj: Any) -> List[str]:
        """Validate data."""
        errors = []
        try:
            validate(obj)
        except ValidationError as e:
            logger.debug(f"Validation failed: {e}")
            errors.append(str(e))
        return errors
