from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from shelfwise.models.item import ItemStatus


def _alias(*names):
    return AliasChoices(*names)


class IntakeRequest(BaseModel):
    barcode: Optional[str] = Field(default=None, validation_alias=_alias("barcode", "isbn"))
    product_type: Literal["BOOK", "DVD", "CD"] = Field(
        default="BOOK", validation_alias=_alias("product_type", "productType")
    )
    cost_cents: int = Field(default=0, ge=0, validation_alias=_alias("cost_cents", "costCents", "cost"))
    title: Optional[str] = None
    author: Optional[str] = None
    publisher: Optional[str] = None
    pub_year: Optional[int] = Field(default=None, validation_alias=_alias("pub_year", "pubYear"))
    binding: Optional[str] = None
    image_url: Optional[str] = Field(default=None, validation_alias=_alias("image_url", "imageUrl"))
    categories: Optional[List[str]] = None
    condition_grade: Optional[str] = Field(
        default=None, max_length=20, validation_alias=_alias("condition_grade", "conditionGrade")
    )
    condition_notes: Optional[str] = Field(
        default=None, validation_alias=_alias("condition_notes", "conditionNotes")
    )

    @field_validator("product_type", mode="before")
    @classmethod
    def _upper(cls, v):
        return v.upper() if isinstance(v, str) else v


class PutawayRequest(BaseModel):
    location: str = Field(min_length=1, max_length=20, validation_alias=_alias("location", "currentLocation"))


class ListItemRequest(BaseModel):
    channel: str = Field(min_length=1, max_length=50)
    external_id: Optional[str] = Field(default=None, validation_alias=_alias("external_id", "externalId"))
    price_cents: int = Field(ge=1, validation_alias=_alias("price_cents", "priceCents", "price"))


class StatusChangeRequest(BaseModel):
    to_status: ItemStatus = Field(validation_alias=_alias("to_status", "toStatus", "status"))
    channel: Optional[str] = Field(default=None, max_length=50)
    note: Optional[str] = None
    override: bool = False


class PatchItemRequest(BaseModel):
    location: Optional[str] = Field(
        default=None, min_length=1, max_length=20, validation_alias=_alias("location", "currentLocation")
    )
    status: Optional[ItemStatus] = Field(default=None, validation_alias=_alias("status", "currentStatus"))
    condition_grade: Optional[str] = Field(
        default=None, max_length=20, validation_alias=_alias("condition_grade", "conditionGrade")
    )
    condition_notes: Optional[str] = Field(
        default=None, validation_alias=_alias("condition_notes", "conditionNotes")
    )
    override: bool = False


class BulkLocationRequest(BaseModel):
    item_ids: List[int] = Field(min_length=1, validation_alias=_alias("item_ids", "itemIds"))
    location: str = Field(min_length=1, max_length=20, validation_alias=_alias("location", "currentLocation"))


class UpdateDatesRequest(BaseModel):
    item_ids: List[int] = Field(min_length=1, validation_alias=_alias("item_ids", "itemIds"))
    date_type: Literal["listed", "sold"] = Field(validation_alias=_alias("date_type", "dateType"))
    date: str = Field(min_length=1)


class ItemSearchQuery(BaseModel):
    status: Optional[ItemStatus] = None
    location: Optional[str] = None
    barcode: Optional[str] = Field(default=None, validation_alias=_alias("barcode", "isbn"))
    search: Optional[str] = None
    lot_number: Optional[int] = Field(default=None, validation_alias=_alias("lot_number", "lotNumber"))
    sort: Optional[Literal["id_asc", "id_desc", "lot"]] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=50, ge=1)
