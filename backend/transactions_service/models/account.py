"""Stored account documents and their embedded transactions."""
from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field
from transactions_service.utils.timestamp import DateValue


class StoredTransaction(BaseModel):
    """
    Transaction as embedded in an account document, before date normalization.

    Validation is strict: a numeric ``date`` is not read as an epoch, and a
    string or boolean ``amount`` is not read as a number. Such documents are
    rejected at the storage boundary.
    """

    model_config = ConfigDict(strict=True)

    type: str = Field(..., description="Free-form category label (e.g. debit, credit)")
    amount: Union[int, float] = Field(..., description="Signed amount")
    date: DateValue = Field(..., description="ISO-8601 text or native date/time value")


class Account(BaseModel):
    """Account (user) document projected to the fields the service reads."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="24-character hexadecimal key")
    transactions: Optional[List[StoredTransaction]] = Field(
        None, description="Embedded transactions; absent or empty means none"
    )

    @property
    def has_transactions(self) -> bool:
        return bool(self.transactions)
