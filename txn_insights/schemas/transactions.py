"""Schema for a single transfer record as it appears in the transaction file."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_serializer, field_validator
from pydantic.alias_generators import to_camel


class Transaction(BaseModel):
    """One immutable transfer between two named parties.

    ``issue_id`` and ``issue_message`` describe an optional compliance issue.
    ``issue_solved`` is present on every record, whether or not an issue is
    attached, and the fields are not validated against each other.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    amount: Decimal = Field(ge=0)
    sender_full_name: str = Field(min_length=1)
    beneficiary_full_name: str = Field(min_length=1)
    issue_id: int | None = Field(default=None, strict=True)
    issue_solved: bool = Field(strict=True)
    issue_message: str | None = None

    @property
    def has_open_issue(self) -> bool:
        return not self.issue_solved

    @field_validator("amount", mode="before")
    @classmethod
    def amount_is_a_number(cls, value: object) -> object:
        # bool is an int subclass; quoted numbers are not amounts
        if isinstance(value, (str, bool)):
            raise ValueError("amount must be a number")
        return value

    def involves(self, client_full_name: str) -> bool:
        """Whether the client is the sender or the beneficiary (exact match)."""
        return client_full_name in (self.sender_full_name, self.beneficiary_full_name)

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal) -> str:
        return format(value, "f")


TransactionList = TypeAdapter(list[Transaction])
