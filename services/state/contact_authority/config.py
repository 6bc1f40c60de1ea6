"""Pydantic settings for Contact Authority Service behavior."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from packages.contacts_shared.config import ContactsSettings, resolve_component_settings
from services.state.contact_authority.component import SERVICE_COMPONENT_ID


class ContactAuthoritySettings(BaseModel):
    """Contact Authority Service runtime behavior settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    default_page_size: int = Field(default=20, gt=0)
    max_page_size: int = Field(default=100, gt=0)
    max_search_length: int = Field(default=128, gt=0)

    @model_validator(mode="after")
    def _validate_page_bounds(self) -> "ContactAuthoritySettings":
        """Require the default page size to fit within the maximum."""
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size must not exceed max_page_size")
        return self


def resolve_contact_authority_settings(
    settings: ContactsSettings,
) -> ContactAuthoritySettings:
    """Resolve CAS settings from ``components.service.contact_authority``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=ContactAuthoritySettings,
    )
