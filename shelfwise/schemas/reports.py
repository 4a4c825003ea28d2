from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class CostRunRequest(BaseModel):
    start_date: str = Field(min_length=1, validation_alias=AliasChoices("start_date", "startDate"))
    end_date: str = Field(min_length=1, validation_alias=AliasChoices("end_date", "endDate"))
    total_cents: int = Field(gt=0, validation_alias=AliasChoices("total_cents", "totalCents", "totalSpentCents"))


class PageQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=50, ge=1)


class WindowQuery(BaseModel):
    days: int = Field(default=30, ge=1, le=3650)


class RecentSalesQuery(BaseModel):
    days: int = Field(default=30, ge=1, le=366)
    limit: int = Field(default=50, ge=1, le=100)


class SalesMonthlyQuery(BaseModel):
    year: Optional[int] = Field(default=None, ge=2000, le=2100)
