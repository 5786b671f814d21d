"""Strategy model: a user's named trading plan and its custom field schema."""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import JSON, UniqueConstraint
from sqlmodel import SQLModel, Field, Column, Relationship

from journal.models.enums import FieldType, Instrument

if TYPE_CHECKING:
    from journal.models.trade import Trade


class Strategy(SQLModel, table=True):
    __tablename__ = "strategy"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_strategy_user_name"),)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: int = Field(foreign_key="user.id", ondelete="CASCADE", index=True)
    name: str
    description: str | None = None
    instrument: Instrument
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    custom_fields: list["CustomField"] = Relationship(
        back_populates="strategy",
        cascade_delete=True,
        sa_relationship_kwargs={"order_by": "CustomField.position"},
    )
    trades: list["Trade"] = Relationship(back_populates="strategy", cascade_delete=True)


class CustomField(SQLModel, table=True):
    __tablename__ = "custom_field"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    strategy_id: uuid.UUID = Field(foreign_key="strategy.id", ondelete="CASCADE", index=True)
    name: str
    type: FieldType
    options: list[str] | None = Field(default=None, sa_column=Column(JSON))  # select types only
    required: bool = False
    position: int = 0  # declaration order within the strategy

    strategy: Strategy | None = Relationship(back_populates="custom_fields")
