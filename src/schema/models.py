"""Swagger model declarations: Model, ModelProperty and array Item."""
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any


@dataclass
class Item:
    """Element schema of an array property: a primitive type or a reference."""

    type: Optional[str] = None
    ref: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Converte para dicionário."""
        data = {}
        if self.type:
            data["type"] = self.type
        if self.ref:
            data["$ref"] = self.ref
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Item":
        return cls(type=data.get("type"), ref=data.get("$ref"))


@dataclass
class ModelProperty:
    """Schema of a single field."""

    type: Optional[str] = None  # "string", "integer", "number", "boolean", "array", "any" or custom
    format: Optional[str] = None  # "int64", "date-time", "byte", ...
    ref: Optional[str] = None  # Id of another Model
    items: Optional[Item] = None  # only when type == "array"
    description: Optional[str] = None

    def is_array(self) -> bool:
        return self.type == "array"

    def is_consistent(self) -> bool:
        """Exactly one of plain type, reference or array-with-items describes the property."""
        if self.is_array():
            return self.ref is None and self.items is not None and bool(self.items.type) != bool(self.items.ref)
        if self.items is not None:
            return False
        return bool(self.type) != bool(self.ref)

    def to_dict(self) -> Dict[str, Any]:
        """Converte para dicionário."""
        data = {}
        if self.type:
            data["type"] = self.type
        if self.format:
            data["format"] = self.format
        if self.ref:
            data["$ref"] = self.ref
        if self.items is not None:
            data["items"] = self.items.to_dict()
        if self.description:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelProperty":
        items = data.get("items")
        return cls(
            type=data.get("type"),
            format=data.get("format"),
            ref=data.get("$ref"),
            items=Item.from_dict(items) if items is not None else None,
            description=data.get("description"),
        )


@dataclass
class Model:
    """A named schema unit, keyed by its canonical type name."""

    id: str
    required: List[str] = field(default_factory=list)
    properties: Dict[str, ModelProperty] = field(default_factory=dict)

    def get_property(self, name: str) -> Optional[ModelProperty]:
        """Retorna propriedade pelo nome JSON."""
        return self.properties.get(name)

    def to_dict(self) -> Dict[str, Any]:
        """Converte para dicionário."""
        # sorted keys keep exported documents diffable
        return {
            "id": self.id,
            "required": list(self.required),
            "properties": {
                name: self.properties[name].to_dict()
                for name in sorted(self.properties)
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Model":
        return cls(
            id=data["id"],
            required=list(data.get("required", [])),
            properties={
                name: ModelProperty.from_dict(prop)
                for name, prop in data.get("properties", {}).items()
            },
        )
