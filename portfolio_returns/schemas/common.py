"""Shared pydantic base for camelCase JSON payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageSchema(CamelModel):
    message: str


__all__ = ["CamelModel", "MessageSchema"]
