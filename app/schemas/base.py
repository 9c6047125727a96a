from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema exposing camelCase JSON while keeping snake_case attributes."""

    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel
