"""Pydantic DTO for partial business settings updates."""

from typing import Any

from pydantic import Field

from atelier.application.schemas.snapshot import CamelModel

_REQUIRED = frozenset({"brand_name", "default_margin"})


class SettingsUpdate(CamelModel):
    """Schema for updating business settings — all fields optional."""

    brand_name: str | None = Field(None, min_length=1, max_length=120)
    default_margin: float | None = Field(None, ge=0)
    initial_funds: float | None = None
    whatsapp_number: str | None = None
    instagram_url: str | None = None
    facebook_url: str | None = None
    shop_logo: str | None = None

    def changes(self) -> dict[str, Any]:
        """Fields the client actually sent; nulls only clear optional fields."""
        sent = self.model_dump(exclude_unset=True)
        return {k: v for k, v in sent.items() if v is not None or k not in _REQUIRED}
