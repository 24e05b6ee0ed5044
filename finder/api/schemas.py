"""Request bodies for the JSON API (camelCase on the wire)."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from finder.filters.state import FilterState, normalize


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FilterPayload(CamelModel):
    """Filter fields shared by subscriptions and saved filters."""

    min_price: float | None = None
    max_price: float | None = None
    min_size: float | None = None
    max_size: float | None = None
    min_rooms: float | None = None
    max_rooms: float | None = None
    include_zero_price: bool = True
    include_zero_size: bool = True
    include_zero_rooms: bool = True
    neighborhoods: list[str] = Field(default_factory=list)
    balcony: list[str] = Field(default_factory=list)
    parking: list[str] = Field(default_factory=list)
    furnished: list[str] = Field(default_factory=list)
    agent: list[str] = Field(default_factory=list)

    def to_state(self) -> FilterState:
        fields = self.model_dump(by_alias=False, include=set(FilterPayload.model_fields))
        return normalize(FilterState(**fields))


class TelegramSubscriptionRequest(FilterPayload):
    chat_id: str = Field(min_length=1)
    token: str = ""
    target_type: Literal["user", "group"] = "user"

    @field_validator("chat_id", mode="before")
    @classmethod
    def _chat_id_as_text(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class WhatsappSubscriptionRequest(FilterPayload):
    phone_number: str = Field(min_length=1)


class UserFilterUpdate(CamelModel):
    """Partial update: only fields present in the body are applied."""

    min_price: float | None = None
    max_price: float | None = None
    min_size: float | None = None
    max_size: float | None = None
    min_rooms: float | None = None
    max_rooms: float | None = None
    include_zero_price: bool | None = None
    include_zero_size: bool | None = None
    include_zero_rooms: bool | None = None
    neighborhoods: list[str] | None = None
    balcony: list[str] | None = None
    parking: list[str] | None = None
    furnished: list[str] | None = None
    agent: list[str] | None = None

    def changes(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in self.model_dump(by_alias=False, exclude_unset=True).items()
            if value is not None
        }


class Credentials(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AdminLoginRequest(CamelModel):
    password: str


class TelegramChatRequest(CamelModel):
    chat_id: str = Field(min_length=1)
