from typing import Optional

from pydantic import BaseModel, Field


class MonthlyQuery(BaseModel):
    year: Optional[int] = Field(default=None, ge=2000, le=2100)


class RecordsQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=50, ge=1)
    year: Optional[int] = Field(default=None, ge=2000, le=2100)
    month: Optional[int] = Field(default=None, ge=1, le=12)
