"""Shared schema base."""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialised with camelCase keys, matching the front-end."""

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
