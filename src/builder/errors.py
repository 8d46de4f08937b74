"""Errors raised by the model builder."""


class DuplicateSchemaNameError(Exception):
    """Two distinct types canonicalize to the same model name"""

    def __init__(self, name: str, existing, incoming):
        self.name = name
        self.existing = existing
        self.incoming = incoming
        super().__init__(
            f"Model name {name!r} is already registered for {existing!r}, "
            f"cannot register {incoming!r}"
        )
