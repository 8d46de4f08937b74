"""
Model Builder Module

Builds swagger Models from Python types with:
- Canonical, collision-checked model names
- Placeholder registration for recursive type graphs
- Array/Optional unwrapping and embedded struct flattening
- Capability hooks (post build customization, custom JSON marshalling)
"""

from .model_builder import ModelBuilder, build_models
from .capabilities import ModelBuildable, JSONMarshaler
from .errors import DuplicateSchemaNameError

__all__ = [
    "ModelBuilder",
    "ModelBuildable",
    "JSONMarshaler",
    "DuplicateSchemaNameError",
    "build_models",
]
