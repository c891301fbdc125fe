"""Common model configuration.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class FrodoModel(BaseModel):
    """Base model mapping snake_case attributes to the camelCase wire format."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump using wire names, dropping unset optional values."""
        return self.model_dump(by_alias=True, exclude_none=True)
