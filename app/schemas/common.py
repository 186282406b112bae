from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base schema whose JSON/stored field names are camelCase.

    Records written by the mobile client use camelCase keys (userId,
    applicationDate, ...); Python code uses the snake_case attributes.
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
