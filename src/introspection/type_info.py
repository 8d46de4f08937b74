"""
Type Info - Describes Python types as a closed set of kinds for model building.

Supports:
- dataclasses and annotated classes (STRUCT), with lazily resolved fields
- list/set/tuple[T, ...]/Sequence and named list subclasses (SEQUENCE)
- Optional[T] (POINTER)
- dict/Mapping (MAP)
- str, str enums (STRING)
- Any, object, unions (ANY)
- primitives, NewTypes and opaque classes (OTHER)
- Forward/self references through typing.get_type_hints
"""

import collections
import collections.abc
import dataclasses
import functools
import inspect
import logging
import types
from enum import Enum
from typing import (
    Annotated,
    Any,
    ClassVar,
    Dict,
    List,
    Literal,
    Mapping,
    Optional,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from src.schema.types import PRIMITIVE_ALIASES, PRIMITIVE_NAMES
from .tags import EMBEDDED_TAG

logger = logging.getLogger(__name__)

ANONYMOUS_MARKER = "__anonymous__"

_SEQUENCE_ORIGINS = (
    list,
    set,
    frozenset,
    collections.deque,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
)

_MAP_ORIGINS = (
    dict,
    collections.OrderedDict,
    collections.defaultdict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)

_UNION_ORIGINS = (Union, types.UnionType)


class Kind(str, Enum):
    """Shape categories the model builder dispatches on"""
    STRUCT = "struct"
    SEQUENCE = "sequence"
    POINTER = "pointer"
    MAP = "map"
    STRING = "string"
    ANY = "any"
    OTHER = "other"


@dataclasses.dataclass
class FieldInfo:
    """A declared struct field"""
    name: str
    type: "TypeInfo"
    tags: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    embedded: bool = False


class TypeInfo:
    """
    Descriptor of one Python type

    Attributes:
        py_type: The described annotation/class
        kind: Kind used for dispatch
        name: Declared short name, "" for anonymous types
        string: Fully qualified string form ("pkg.mod.Order", "[]int", "*pkg.Node")
        elem: Element (SEQUENCE), pointee (POINTER) or value (MAP) type
        key: Key type (MAP)
    """

    def __init__(
        self,
        py_type: Any,
        kind: Kind,
        name: str,
        string: str,
        elem: Optional["TypeInfo"] = None,
        key: Optional["TypeInfo"] = None,
        struct_source: Any = None,
    ):
        self.py_type = py_type
        self.kind = kind
        self.name = name
        self.string = string
        self.elem = elem
        self.key = key
        self._struct_source = struct_source
        self._fields: Optional[List[FieldInfo]] = None

    @property
    def is_anonymous(self) -> bool:
        return self.name == ""

    @property
    def fields(self) -> List[FieldInfo]:
        """Struct fields in declaration order (resolved on first access)"""
        if self.kind != Kind.STRUCT:
            return []
        if self._fields is None:
            self._fields = _struct_fields(self._struct_source)
        return self._fields

    def __repr__(self) -> str:
        return f"TypeInfo({self.kind.value}, {self.string!r})"


CACHE_SIZE = 1024


def describe(tp: Any) -> TypeInfo:
    """
    Describe a Python type (class or typing construct)

    Results are cached per type (least recently used first out, at most
    CACHE_SIZE entries) so cyclic graphs share descriptors.
    """
    try:
        hash(tp)
    except TypeError:  # unhashable annotation
        return _describe(tp)
    return _describe_cached(tp)


@functools.lru_cache(maxsize=CACHE_SIZE)
def _describe_cached(tp: Any) -> TypeInfo:
    return _describe(tp)


def clear_cache() -> None:
    """Drop all cached descriptors"""
    _describe_cached.cache_clear()


def anonymous_struct(fields, *, module: Optional[str] = None, **kwargs) -> type:
    """
    Create an unnamed struct type (inline struct literal)

    Args:
        fields: Same as dataclasses.make_dataclass fields
        module: Module used to resolve string annotations

    Returns:
        Dataclass whose model name is synthesized from the enclosing field
    """
    cls = dataclasses.make_dataclass("anonymous", fields, **kwargs)
    setattr(cls, ANONYMOUS_MARKER, True)
    if module:
        cls.__module__ = module
    return cls


def qualified_name(cls: Any) -> str:
    """Declared name including module, builtins unqualified"""
    if cls in PRIMITIVE_ALIASES:
        return PRIMITIVE_ALIASES[cls]
    module = getattr(cls, "__module__", None)
    name = getattr(cls, "__qualname__", None) or getattr(cls, "__name__", None) or repr(cls)
    if not module or module == "builtins":
        return name
    return f"{module}.{name}"


def _describe(tp: Any) -> TypeInfo:
    if tp is Any or tp is object or tp is type(None) or tp is None:
        return TypeInfo(tp, Kind.ANY, "", "any")

    if _is_hashable(tp) and tp in PRIMITIVE_ALIASES:
        kind = Kind.STRING if tp.__supertype__ is str else Kind.OTHER
        return TypeInfo(tp, kind, tp.__name__, PRIMITIVE_ALIASES[tp])

    if hasattr(tp, "__supertype__"):  # user NewType
        base = describe(tp.__supertype__)
        return TypeInfo(
            tp,
            base.kind,
            tp.__name__,
            qualified_name(tp),
            elem=base.elem,
            key=base.key,
            struct_source=base._struct_source,
        )

    origin = get_origin(tp)
    if origin is not None:
        return _describe_generic(tp, origin, get_args(tp))

    if isinstance(tp, type):
        return _describe_class(tp)

    # TypeVar, unresolved ForwardRef, string annotation ...
    logger.debug(f"Cannot describe {tp!r}, using any")
    return TypeInfo(tp, Kind.ANY, "", "any")


def _describe_generic(tp: Any, origin: Any, args: Tuple[Any, ...]) -> TypeInfo:
    if origin is Annotated:
        return describe(args[0])

    if origin in _UNION_ORIGINS:
        non_none = [a for a in args if a is not type(None)]
        if len(non_none) == 1 and len(non_none) < len(args):
            elem = describe(non_none[0])
            return TypeInfo(tp, Kind.POINTER, "", "*" + elem.string, elem=elem)
        return TypeInfo(tp, Kind.ANY, "", "any")

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return _sequence(tp, describe(args[0]))
        if not args:
            return _sequence(tp, describe(Any))
        return TypeInfo(tp, Kind.ANY, "", "any")

    if origin in _SEQUENCE_ORIGINS:
        return _sequence(tp, describe(args[0] if args else Any))

    if origin in _MAP_ORIGINS:
        key = describe(args[0] if args else Any)
        value = describe(args[1] if len(args) > 1 else Any)
        return TypeInfo(tp, Kind.MAP, "", f"map[{key.string}]{value.string}", elem=value, key=key)

    if origin is Literal:
        if args and all(isinstance(a, str) for a in args):
            return TypeInfo(tp, Kind.STRING, "", "str")
        return TypeInfo(tp, Kind.ANY, "", "any")

    # user generics, e.g. Page[Order]
    return describe(origin)


def _describe_class(cls: type) -> TypeInfo:
    if cls in (list, set, frozenset, tuple, collections.deque):
        return _sequence(cls, describe(Any))
    if cls is dict:
        return TypeInfo(cls, Kind.MAP, "", "map[any]any", elem=describe(Any), key=describe(Any))

    string = qualified_name(cls)

    if cls.__dict__.get(ANONYMOUS_MARKER, False):
        return TypeInfo(cls, Kind.STRUCT, "", _anonymous_string(cls), struct_source=cls)

    if issubclass(cls, str):
        return TypeInfo(cls, Kind.STRING, cls.__name__, string)

    # named list-likes; NamedTuples stay structs
    if issubclass(cls, (list, set, frozenset, collections.deque)) or (
        issubclass(cls, tuple) and not hasattr(cls, "_fields")
    ):
        return TypeInfo(cls, Kind.SEQUENCE, cls.__name__, string, elem=describe(_sequence_arg(cls)))

    if issubclass(cls, Enum) or string in PRIMITIVE_NAMES:
        return TypeInfo(cls, Kind.OTHER, cls.__name__, string)

    if dataclasses.is_dataclass(cls) or _has_annotations(cls):
        return TypeInfo(cls, Kind.STRUCT, cls.__name__, string, struct_source=cls)

    return TypeInfo(cls, Kind.OTHER, cls.__name__, string)


def _sequence(tp: Any, elem: TypeInfo) -> TypeInfo:
    return TypeInfo(tp, Kind.SEQUENCE, "", "[]" + elem.string, elem=elem)


def _sequence_arg(cls: type) -> Any:
    """Element type of a list-like subclass, e.g. str for class Tags(List[str])"""
    for klass in cls.__mro__:
        for base in klass.__dict__.get("__orig_bases__", ()):
            origin = get_origin(base)
            if origin is tuple or origin in _SEQUENCE_ORIGINS:
                args = get_args(base)
                return args[0] if args else Any
    return Any


def _anonymous_string(cls: type) -> str:
    parts = []
    for name, annotation in inspect.get_annotations(cls).items():
        type_name = annotation if isinstance(annotation, str) else getattr(annotation, "__name__", repr(annotation))
        parts.append(f"{name} {type_name}")
    return "struct { " + "; ".join(parts) + " }"


def _has_annotations(cls: type) -> bool:
    for klass in cls.__mro__:
        if klass is object:
            continue
        try:
            if inspect.get_annotations(klass):
                return True
        except (TypeError, NameError):
            continue
    return False


def _is_hashable(tp: Any) -> bool:
    try:
        hash(tp)
    except TypeError:
        return False
    return True


def _is_class_var(hint: Any) -> bool:
    return hint is ClassVar or get_origin(hint) is ClassVar


def _resolve_hints(cls: type) -> Dict[str, Any]:
    try:
        return get_type_hints(cls)
    except (NameError, TypeError) as e:
        logger.warning(f"Could not resolve annotations of {qualified_name(cls)}: {e}")
        return {}


def _struct_fields(cls: type) -> List[FieldInfo]:
    hints = _resolve_hints(cls)

    if dataclasses.is_dataclass(cls):
        result = []
        for f in dataclasses.fields(cls):
            hint = hints.get(f.name, f.type)
            tags = dict(f.metadata)
            result.append(FieldInfo(
                name=f.name,
                type=describe(hint),
                tags=tags,
                embedded=bool(tags.get(EMBEDDED_TAG)),
            ))
        return result

    return [
        FieldInfo(name=name, type=describe(hint))
        for name, hint in hints.items()
        if not name.startswith("_") and not _is_class_var(hint)
    ]
