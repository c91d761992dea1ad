"""Base model for JSON payloads exchanged with the web client."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase keys or snake_case names; dumps camelCase with ``by_alias=True``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
