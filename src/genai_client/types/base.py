"""
Base model for wire types: snake_case attributes, camelCase JSON.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        protected_namespaces=(),
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump as the JSON object sent to the service (camelCase, unset fields dropped)."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
