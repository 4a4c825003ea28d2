from typing import List

from pydantic import AliasChoices, BaseModel, Field


class CreateLotRequest(BaseModel):
    lot_number: int = Field(ge=1, validation_alias=AliasChoices("lot_number", "lotNumber"))
    item_ids: List[int] = Field(min_length=1, validation_alias=AliasChoices("item_ids", "itemIds"))


class RemoveFromLotRequest(BaseModel):
    item_id: int = Field(validation_alias=AliasChoices("item_id", "itemId"))
