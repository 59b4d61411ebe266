"""Monthly aggregate and response models."""
from datetime import datetime
from typing import List, Union
from pydantic import BaseModel, ConfigDict, Field


class MonthKey(BaseModel):
    """Calendar year and month (UTC) a group covers."""

    year: int
    month: int = Field(..., ge=1, le=12)


class MonthGroupItem(BaseModel):
    """One transaction inside a month group."""

    type: str
    amount: Union[int, float]
    date: datetime = Field(..., description="Normalized date (UTC)")


class MonthGroup(BaseModel):
    """Transactions sharing a calendar year and month."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "_id": {"year": 2024, "month": 3},
                "count": 2,
                "totalAmount": 250,
                "items": [
                    {"type": "debit", "amount": 50, "date": "2024-03-05T00:00:00Z"},
                    {"type": "credit", "amount": 200, "date": "2024-03-20T00:00:00Z"},
                ],
            }
        },
    )

    id: MonthKey = Field(..., alias="_id")
    count: int = Field(..., ge=1)
    total_amount: Union[int, float] = Field(..., alias="totalAmount")
    items: List[MonthGroupItem] = Field(default_factory=list)


class StatusResponse(BaseModel):
    """Health check response."""

    ok: bool = True


class ErrorResponse(BaseModel):
    """Error body returned for every non-2xx response."""

    error: str
