"""Canonical logging field names for structured log consistency."""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"

# Envelope/correlation fields.
TRACE_ID = "trace_id"
ENVELOPE_ID = "envelope_id"
PRINCIPAL = "principal"

# Public API invocation fields.
COMPONENT_ID = "component_id"
API_NAME = "api_name"
PUBLIC_API_INVOCATION_EVENT = "public_api_invocation"
PUBLIC_API_COMPLETION_EVENT = "public_api_completion"
SUCCESS = "success"
DURATION_MS = "duration_ms"
ERRORS = "errors"
OUTCOME = "outcome"
ERROR_CATEGORY = "error_category"

# Audit stamping fields.
AUDIT_STAMP_EVENT = "audit_stamp"
AUDIT_PATH = "audit_path"
INSERTED = "inserted"
UPDATED = "updated"
SOFT_DELETED = "soft_deleted"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
