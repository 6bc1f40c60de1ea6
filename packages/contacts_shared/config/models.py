"""Settings models for the contacts backend.

Component settings stay untyped here and are validated by each component
against its own model through :func:`resolve_component_settings`.
"""

from __future__ import annotations

from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_COMPONENT_KINDS = ("service", "substrate")


class LoggingSettings(BaseModel):
    """Where and how contacts processes write their logs."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "contacts"
    environment: str = "dev"


class PublicApiOtelSettings(BaseModel):
    """Instrument names for public contacts API spans and metrics."""

    meter_name: str = "contacts.public_api"
    tracer_name: str = "contacts.public_api"
    metric_public_api_calls_total: str = "contacts_public_api_calls_total"
    metric_public_api_duration_ms: str = "contacts_public_api_duration_ms"
    metric_public_api_errors_total: str = "contacts_public_api_errors_total"


class ObservabilitySettings(BaseModel):
    public_api_otel: PublicApiOtelSettings = Field(
        default_factory=PublicApiOtelSettings
    )


class ComponentsSettings(BaseModel):
    """Raw settings keyed as ``components.<kind>.<name>``."""

    model_config = ConfigDict(extra="forbid")

    service: dict[str, dict[str, Any]] = Field(default_factory=dict)
    substrate: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _require_grouped_keys(cls, value: object) -> object:
        """Point ``substrate_postgres``-style keys at their grouped location."""
        for key in value if isinstance(value, dict) else ():
            kind, _, name = str(key).partition("_")
            if kind in _COMPONENT_KINDS and name:
                raise ValueError(
                    f"components.{key} is invalid; use components.{kind}.{name} instead"
                )
        return value


class ContactsSettings(BaseSettings):
    """Root settings; see :mod:`.loader` for how the layers combine."""

    model_config = SettingsConfigDict(
        env_prefix="CONTACTS_",
        env_nested_delimiter="__",
        extra="ignore",
        nested_model_default_partial_update=True,
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
    components: ComponentsSettings = Field(default_factory=ComponentsSettings)


TComponentSettings = TypeVar("TComponentSettings", bound=BaseModel)


def resolve_component_settings(
    *,
    settings: ContactsSettings,
    component_id: str,
    model: type[TComponentSettings],
) -> TComponentSettings:
    """Validate the settings of ``component_id`` (``<kind>_<name>``) as ``model``.

    A component with no configured keys gets ``model``'s defaults.
    """
    kind, _, name = component_id.partition("_")
    if kind not in _COMPONENT_KINDS or not name:
        raise ValueError(f"unsupported component id: {component_id}")
    namespace: dict[str, dict[str, Any]] = getattr(settings.components, kind)
    return model.model_validate(namespace.get(name, {}))
