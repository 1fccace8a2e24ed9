from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class RecordSchema(BaseSchema):
    """Engine-owned record. Updates go through ``model_copy`` so readers never see a mutation."""

    model_config = ConfigDict(from_attributes=True, frozen=True)


class MessageResponse(BaseSchema):
    message: str
