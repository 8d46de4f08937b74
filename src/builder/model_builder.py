"""
Model Builder - Synthesizes swagger Models from Python types.

Features:
- One Model per struct type, keyed by its canonical (or synthesized) name
- Cycle breaking by registering a placeholder before recursing into fields
- Primitive mapping to (type, format) pairs
- Array and Optional unwrapping
- Embedded struct flattening
- Opaque string properties for types doing their own JSON marshalling
- Post build customization hook for top-level samples
- Name collision detection (warning by default, error in strict mode)

A builder is one synthesis session. It is not safe for concurrent use;
use one builder per session and merge finished models under your own lock.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, get_origin

from src.introspection.tags import (
    DESCRIPTION_TAG,
    has_named_json_tag,
    is_property_required,
    is_string_coerced,
    json_name_of_field,
)
from src.introspection.type_info import FieldInfo, Kind, TypeInfo, describe
from src.schema.models import Item, Model, ModelProperty
from src.schema.types import is_primitive_type, json_schema_format, json_schema_type

from .capabilities import marshals_json, post_build_hook
from .errors import DuplicateSchemaNameError

logger = logging.getLogger(__name__)

# element kinds that never become referenced models
_INLINE_ELEMENT_TYPES = {
    Kind.STRING: "string",
    Kind.MAP: "any",
    Kind.ANY: "any",
}


class ModelBuilder:
    """
    Builds a de-duplicated collection of Models from sample values or types

    Usage:
    ```python
    builder = ModelBuilder()
    builder.add_model_from(Order)
    builder.add_model_from(Customer(name="x"))
    document["models"] = builder.to_dict()
    ```
    """

    def __init__(
        self,
        models: Optional[Dict[str, Model]] = None,
        strict: bool = False,
        parent: Optional["ModelBuilder"] = None,
    ):
        """
        Initialize ModelBuilder

        Args:
            models: Existing models to merge into (shared document)
            strict: Raise DuplicateSchemaNameError on name collisions
            parent: Enclosing builder, used by embedded struct flattening
        """
        self.models: Dict[str, Model] = models if models is not None else {}
        self.strict = strict
        self._parent = parent
        self._sources: Dict[str, TypeInfo] = {}
        # embedded types whose flattening is in progress
        self._flattening: List[Any] = []

    def add_model_from(self, sample: Any) -> Optional[Model]:
        """
        Create and add the Model of a sample, then call its post build hook

        Args:
            sample: Instance, class or typing construct

        Returns:
            The new Model, or None if it was primitive or already registered
        """
        model = self.add_model(describe(_type_of(sample)))
        if model is None:
            return None

        # allow customizations
        hook = post_build_hook(sample)
        if hook is not None:
            customized = hook(model)
            if customized.id != model.id:
                logger.warning(
                    f"post_build_model changed id {model.id!r} to {customized.id!r}, keeping {model.id!r}"
                )
            self.models[model.id] = customized
            model = customized
        return model

    register = add_model_from

    def add_model(self, st: TypeInfo, name_override: str = "") -> Optional[Model]:
        """Add the Model of a type (and every type it references) unless known"""
        if st.kind == Kind.POINTER:
            return self.add_model(st.elem, name_override)

        model_name = name_override or self.key_from(st)
        # no models needed for primitive types
        if is_primitive_type(model_name):
            return None
        # see if we already have visited this model
        if self._is_known(model_name, st):
            return None
        return self._build(st, model_name)

    def _build(self, st: TypeInfo, model_name: str) -> Model:
        model = Model(id=model_name)

        # reference the model before further initializing (enables recursive structs)
        self.models[model_name] = model
        self._sources[model_name] = st
        logger.debug(f"Building model {model_name}")

        if st.kind == Kind.SEQUENCE:
            elem = st.elem.elem if st.elem.kind == Kind.POINTER else st.elem
            if elem.kind not in _INLINE_ELEMENT_TYPES:
                self.add_model(elem)
            return model
        if st.kind != Kind.STRUCT:
            return model

        for field in st.fields:
            json_name, prop = self.build_property(field, model, model_name)
            description = field.tags.get(DESCRIPTION_TAG)
            if description:
                prop.description = description
            # add if not omitted
            if json_name:
                if is_property_required(field.tags) and json_name not in model.required:
                    model.required.append(json_name)
                model.properties[json_name] = prop

        # update model builder with completed model
        self.models[model_name] = model
        return model

    def build_property(self, field: FieldInfo, model: Model, model_name: str) -> Tuple[str, ModelProperty]:
        """
        Map one struct field to its JSON name and property

        An empty name means the field contributes no property of its own
        (skipped, or flattened into the model).
        """
        json_name = json_name_of_field(field.name, field.tags)
        if not json_name:
            return "", ModelProperty()

        field_type = field.type

        # check if type is doing its own marshalling
        marshaler = field_type.elem if field_type.kind == Kind.POINTER else field_type
        if marshals_json(marshaler.py_type):
            return json_name, ModelProperty(type="string", format=json_schema_format(marshaler.string) or None)

        # check if annotation says it is a string
        if is_string_coerced(field.tags):
            return json_name, ModelProperty(type="string")

        return self._build_kind_property(field, field_type, json_name, model, model_name)

    def _build_kind_property(
        self,
        field: FieldInfo,
        field_type: TypeInfo,
        json_name: str,
        model: Model,
        model_name: str,
    ) -> Tuple[str, ModelProperty]:
        kind = field_type.kind
        if kind == Kind.STRUCT:
            return self.build_struct_type_property(field, field_type, json_name, model)
        if kind == Kind.SEQUENCE:
            return self.build_array_type_property(field_type, json_name, model_name)
        if kind == Kind.POINTER:
            return self.build_pointer_type_property(field, field_type, json_name, model, model_name)
        if kind == Kind.STRING:
            return json_name, ModelProperty(type="string")
        if kind in (Kind.MAP, Kind.ANY):
            # unstructured, swagger 1.2 can't describe arbitrary keys
            return json_name, ModelProperty(type="any")

        type_name = field_type.string
        if is_primitive_type(type_name):
            return json_name, ModelProperty(
                type=json_schema_type(type_name),
                format=json_schema_format(type_name) or None,
            )

        if field_type.is_anonymous:
            nested_type_name = f"{model_name}.{json_name}"
            self.add_model(field_type, nested_type_name)
            return json_name, ModelProperty(ref=nested_type_name)
        self.add_model(field_type)
        return json_name, ModelProperty(ref=type_name)

    def build_struct_type_property(
        self,
        field: FieldInfo,
        field_type: TypeInfo,
        json_name: str,
        model: Model,
    ) -> Tuple[str, ModelProperty]:
        if field_type.is_anonymous:
            anon_type = f"{model.id}.{json_name}"
            self.add_model(field_type, anon_type)
            return json_name, ModelProperty(ref=anon_type)

        if field.embedded and not has_named_json_tag(field.tags):
            self._flatten_embedded(field_type, model)
            # empty name signals skip property
            return "", ModelProperty()

        # simple struct
        self.add_model(field_type)
        return json_name, ModelProperty(ref=self.key_from(field_type))

    def build_array_type_property(self, field_type: TypeInfo, json_name: str, model_name: str) -> Tuple[str, ModelProperty]:
        prop = ModelProperty(type="array", items=Item())

        elem = field_type.elem
        if elem.kind == Kind.POINTER:
            elem = elem.elem

        if elem.kind in _INLINE_ELEMENT_TYPES:
            prop.items.type = _INLINE_ELEMENT_TYPES[elem.kind]
            return json_name, prop

        elem_type_name = self.get_element_type_name(model_name, json_name, elem)
        if is_primitive_type(elem_type_name):
            prop.items.type = json_schema_type(elem_type_name)
        else:
            prop.items.ref = elem_type_name
            # add|overwrite model for element type
            self.add_model(elem, elem_type_name)
        return json_name, prop

    def build_pointer_type_property(
        self,
        field: FieldInfo,
        field_type: TypeInfo,
        json_name: str,
        model: Model,
        model_name: str,
    ) -> Tuple[str, ModelProperty]:
        pointee = field_type.elem

        # pointer to list-likes is a list
        if pointee.kind == Kind.SEQUENCE:
            return self.build_array_type_property(pointee, json_name, model_name)

        # Optional of a value maps like the value itself
        if pointee.kind in _INLINE_ELEMENT_TYPES or is_primitive_type(pointee.string):
            return self._build_kind_property(field, pointee, json_name, model, model_name)

        # non-array, pointer type
        if pointee.is_anonymous:
            elem_name = f"{model_name}.{json_name}"
            self.add_model(pointee, elem_name)
            return json_name, ModelProperty(ref=elem_name)
        self.add_model(pointee)
        return json_name, ModelProperty(ref=self.key_from(pointee))

    def get_element_type_name(self, model_name: str, json_name: str, t: TypeInfo) -> str:
        if t.kind == Kind.POINTER:
            t = t.elem
        if t.is_anonymous:
            return f"{model_name}.{json_name}"
        return self.key_from(t)

    def key_from(self, st: TypeInfo) -> str:
        """Canonical model name of a type"""
        key = st.string
        if st.is_anonymous:  # unnamed type
            # Swagger UI has special meaning for [
            key = key.replace("[]", "||")
        return key

    def get(self, name: str) -> Optional[Model]:
        return self.models.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self.models

    def __len__(self) -> int:
        return len(self.models)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the models section of an api declaration"""
        return {name: self.models[name].to_dict() for name in sorted(self.models)}

    def _flatten_embedded(self, field_type: TypeInfo, model: Model) -> None:
        """Merge the properties of an embedded struct into the model"""
        if self._is_flattening(field_type.py_type):
            logger.debug(f"Embedded cycle on {field_type.string}, not flattening again")
            return

        sub = ModelBuilder(strict=self.strict, parent=self)
        self._flattening.append(field_type.py_type)
        try:
            sub_model = sub._build(field_type, sub.key_from(field_type))
        finally:
            self._flattening.pop()

        # merge properties from sub
        for name, prop in sub_model.properties.items():
            model.properties[name] = prop
            # if sub model says this property is required then include it
            if name in sub_model.required and name not in model.required:
                model.required.append(name)

        # add the referenced model types to the global model list
        for name in sub._referenced_names(sub_model):
            self._store(name, sub.models[name], sub._sources.get(name))

    def _referenced_names(self, root: Model) -> List[str]:
        """Names of models in this builder reachable through references of root"""
        seen: List[str] = []
        pending = [root]
        while pending:
            current = pending.pop()
            for prop in current.properties.values():
                for ref in (prop.ref, prop.items.ref if prop.items else None):
                    if ref and ref in self.models and ref not in seen:
                        seen.append(ref)
                        pending.append(self.models[ref])
        return seen

    def _store(self, name: str, model: Model, source: Optional[TypeInfo]) -> None:
        existing = self._lookup_source(name)
        if existing is not None and source is not None and not _same_source(existing, source):
            self._collision(name, existing.py_type, source.py_type)
        self.models[name] = model
        if source is not None:
            self._sources[name] = source

    def _is_known(self, name: str, st: TypeInfo) -> bool:
        builder = self
        while builder is not None:
            if name in builder.models:
                existing = builder._sources.get(name)
                if existing is not None and not _same_source(existing, st):
                    self._collision(name, existing.py_type, st.py_type)
                return True
            builder = builder._parent
        return False

    def _is_flattening(self, py_type: Any) -> bool:
        builder = self
        while builder is not None:
            if py_type in builder._flattening:
                return True
            builder = builder._parent
        return False

    def _lookup_source(self, name: str) -> Optional[TypeInfo]:
        builder = self
        while builder is not None:
            if name in builder._sources:
                return builder._sources[name]
            builder = builder._parent
        return None

    def _collision(self, name: str, existing: Any, incoming: Any) -> None:
        if self.strict:
            raise DuplicateSchemaNameError(name, existing, incoming)
        logger.warning(f"Model name collision on {name!r}: {existing!r} and {incoming!r}")


def _source_key(st: TypeInfo) -> Any:
    """
    Identity of a type for collision checks

    Spellings of the same shape compare equal: List[T], list[T] and
    Sequence[T] are all arrays of T, Optional wrappers are transparent.
    """
    if st.kind == Kind.POINTER:
        return _source_key(st.elem)
    if st.kind == Kind.SEQUENCE and st.is_anonymous:
        return ("[]", _source_key(st.elem))
    if st.kind == Kind.MAP and st.is_anonymous:
        return ("map", _source_key(st.key), _source_key(st.elem))
    return st.py_type


def _same_source(a: TypeInfo, b: TypeInfo) -> bool:
    return a is b or _source_key(a) == _source_key(b)


def _type_of(sample: Any) -> Any:
    """The type to describe for a sample value or type"""
    if isinstance(sample, type) or hasattr(sample, "__supertype__"):
        return sample
    if get_origin(sample) is not None or sample is Any:
        return sample
    return type(sample)


def build_models(*samples: Any, strict: bool = False) -> Dict[str, Model]:
    """
    Build the models of several samples in one session

    Returns:
        Mapping of model name to Model
    """
    builder = ModelBuilder(strict=strict)
    for sample in samples:
        builder.add_model_from(sample)
    return builder.models
