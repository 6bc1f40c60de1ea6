"""Component identity for Contact Authority Service."""

from __future__ import annotations

SERVICE_COMPONENT_ID = "service_contact_authority"
"""Canonical component id; also names the service-owned Postgres schema."""
