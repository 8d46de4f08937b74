"""
Capabilities probed on arbitrary types while building models.

Both are checked structurally: a type only has to provide the method,
it does not have to inherit from the protocol.
"""

import inspect
import logging
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from src.schema.models import Model

logger = logging.getLogger(__name__)

POST_BUILD_HOOK = "post_build_model"
MARSHAL_METHOD = "to_json"


@runtime_checkable
class ModelBuildable(Protocol):
    """Types that need more control over how their Model appears in the api declaration"""

    def post_build_model(self, model: Model) -> Model:
        ...


@runtime_checkable
class JSONMarshaler(Protocol):
    """Types doing their own JSON marshalling"""

    def to_json(self) -> str:
        ...


def marshals_json(tp: Any) -> bool:
    """True if the type serializes itself (its schema is opaque)"""
    return isinstance(tp, type) and callable(getattr(tp, MARSHAL_METHOD, None))


def post_build_hook(sample: Any) -> Optional[Callable[[Model], Model]]:
    """
    Find the post build hook of a sample

    Instances use their bound method. Classes only qualify when the hook is a
    classmethod or staticmethod, since there is no instance to bind to.
    """
    if isinstance(sample, type):
        attr = inspect.getattr_static(sample, POST_BUILD_HOOK, None)
        if isinstance(attr, (classmethod, staticmethod)):
            return getattr(sample, POST_BUILD_HOOK)
        if attr is not None:
            logger.debug(f"{sample.__name__}.{POST_BUILD_HOOK} needs an instance, hook skipped")
        return None

    hook = getattr(sample, POST_BUILD_HOOK, None)
    return hook if callable(hook) else None
