"""Contact Authority Service native package exports."""

from packages.contacts_shared.envelope import Envelope, EnvelopeKind, EnvelopeMeta
from packages.contacts_shared.errors import ErrorCategory, ErrorDetail
from services.state.contact_authority.component import SERVICE_COMPONENT_ID
from services.state.contact_authority.config import ContactAuthoritySettings
from services.state.contact_authority.domain import (
    AddressRecord,
    CompanyRef,
    ContactPage,
    ContactRecord,
    ContactSort,
    ContactSummary,
    EmailAddressInput,
    EmailAddressRecord,
    GroupRef,
    HealthStatus,
    PhoneNumberInput,
    PhoneNumberRecord,
    RelativeRecord,
)
from services.state.contact_authority.implementation import (
    AsyncContactAuthorityService,
    DefaultContactAuthorityService,
)
from services.state.contact_authority.service import (
    ContactAuthorityService,
    build_contact_authority_service,
)

__all__ = [
    "SERVICE_COMPONENT_ID",
    "AddressRecord",
    "AsyncContactAuthorityService",
    "CompanyRef",
    "ContactAuthorityService",
    "ContactAuthoritySettings",
    "ContactPage",
    "ContactRecord",
    "ContactSort",
    "ContactSummary",
    "DefaultContactAuthorityService",
    "EmailAddressInput",
    "EmailAddressRecord",
    "Envelope",
    "EnvelopeKind",
    "EnvelopeMeta",
    "ErrorCategory",
    "ErrorDetail",
    "GroupRef",
    "HealthStatus",
    "PhoneNumberInput",
    "PhoneNumberRecord",
    "RelativeRecord",
    "build_contact_authority_service",
]
