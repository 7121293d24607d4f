from typing import Any, Self
from uuid import UUID, uuid4

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pymongo.asynchronous.cursor import AsyncCursor


class MongoModel(BaseModel):
    """Stored document: snake_case in MongoDB, camelCase at the API boundary."""

    id: UUID = Field(alias="_id", serialization_alias="id", default_factory=uuid4)

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_schema_serialization_defaults_required=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )

    def to_mongo(self) -> dict[str, Any]:
        """Convert the model to a dictionary for MongoDB storage with _id field."""
        data = self.model_dump()
        data["_id"] = data.pop("id")
        return data

    @classmethod
    async def list_cursor(cls, cursor: AsyncCursor[dict[str, Any]]) -> list[Self]:
        """Iterate over an AsyncCursor and return a list of model instances."""
        return [cls.model_validate(item) async for item in cursor]


class ApiModel(BaseModel):
    """Non-persisted model exposed at the API boundary with camelCase keys.

    Accepts either camelCase or snake_case on input.
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)
