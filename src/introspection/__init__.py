"""
Type Introspection Module

Describes Python types for model building.
Supports:
- dataclasses and annotated classes, including self references
- typing generics (List, Optional, Dict, Tuple[T, ...], ...)
- NewType aliases and fixed-width primitive aliases
- Anonymous (inline) struct types
- Field naming tags in dataclass metadata
"""

from .type_info import Kind, TypeInfo, FieldInfo, describe, anonymous_struct
from .tags import json_field

__all__ = [
    "Kind",
    "TypeInfo",
    "FieldInfo",
    "describe",
    "anonymous_struct",
    "json_field",
]
