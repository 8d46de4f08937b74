"""
Field tags - naming/description annotations carried in dataclass field metadata.

Metadata keys:
- "json": naming tag "name,modifier,...". "-" skips the field; modifiers are
  "omitempty", "string" and "inline"
- "description": free text description of the field
- "embedded": flatten the struct's fields into the containing model
- "binding": "required" for runtime validation
- "form": "-" excludes the field from runtime validation
"""

import dataclasses
from typing import Any, List, Optional, Tuple

JSON_TAG = "json"
DESCRIPTION_TAG = "description"
EMBEDDED_TAG = "embedded"
BINDING_TAG = "binding"
FORM_TAG = "form"

OMIT_EMPTY = "omitempty"
STRING = "string"
INLINE = "inline"
SKIP = "-"


def json_field(
    name: Optional[str] = None,
    *,
    omitempty: bool = False,
    string: bool = False,
    inline: bool = False,
    skip: bool = False,
    description: Optional[str] = None,
    embedded: bool = False,
    binding: Optional[str] = None,
    form: Optional[str] = None,
    **kwargs: Any,
):
    """
    dataclasses.field() with naming tags

    Usage:
    ```python
    @dataclass
    class Order:
        id: int32 = json_field("id", description="order number")
        note: str = json_field("note", omitempty=True, default="")
        audit: Audit = json_field(embedded=True, default_factory=Audit)
    ```
    """
    metadata = dict(kwargs.pop("metadata", None) or {})

    if skip:
        metadata[JSON_TAG] = SKIP
    else:
        modifiers = [m for m, on in ((OMIT_EMPTY, omitempty), (STRING, string), (INLINE, inline)) if on]
        if name or modifiers:
            metadata[JSON_TAG] = ",".join([name or ""] + modifiers)
    if description:
        metadata[DESCRIPTION_TAG] = description
    if embedded:
        metadata[EMBEDDED_TAG] = True
    if binding:
        metadata[BINDING_TAG] = binding
    if form:
        metadata[FORM_TAG] = form

    return dataclasses.field(metadata=metadata, **kwargs)


def parse_json_tag(tag: str) -> Tuple[str, List[str]]:
    """Split "name,omitempty" into ("name", ["omitempty"])"""
    parts = tag.split(",")
    return parts[0], parts[1:]


def json_name_of_field(name: str, tags) -> str:
    """
    Name of the field as it should appear in JSON format

    An empty string indicates that this field is not part of the JSON representation
    """
    json_tag = tags.get(JSON_TAG, "")
    if json_tag:
        tag_name, _ = parse_json_tag(json_tag)
        if tag_name == SKIP:
            return ""
        if tag_name:
            return tag_name
    return name


def has_json_modifier(tags, modifier: str) -> bool:
    json_tag = tags.get(JSON_TAG, "")
    if not json_tag:
        return False
    _, modifiers = parse_json_tag(json_tag)
    return modifier in modifiers


def has_named_json_tag(tags) -> bool:
    """True if the tag gives an explicit name and is not marked inline"""
    tag_name, modifiers = parse_json_tag(tags.get(JSON_TAG, ""))
    if INLINE in modifiers:
        return False
    return len(tag_name) > 0


def is_property_required(tags) -> bool:
    """Every property is required unless tagged omitempty"""
    return not has_json_modifier(tags, OMIT_EMPTY)


def is_string_coerced(tags) -> bool:
    return has_json_modifier(tags, STRING)
