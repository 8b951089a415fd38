"""Organization verification and state transitions"""

import pytest

from acme_csr.domain.entities.organization import Organization
from acme_csr.domain.enums import OrganizationStatus
from acme_csr.domain.events.organization_events import OrganizationVerified
from acme_csr.domain.exceptions import OrganizationException
from acme_csr.domain.value_objects.email import Email
from acme_csr.domain.value_objects.translatable import TranslatableText

pytestmark = pytest.mark.unit


def _eligible(**overrides):
    details = {
        "registration_number": "RC-2024-118",
        "tax_id": "TX-99",
        "email": Email("contact@acme.org"),
        "category": "environment",
        **overrides,
    }
    return Organization.create(TranslatableText({"en": "Acme Foundation"}), **details)


class TestVerification:

    def test_complete_profile_is_eligible(self):
        organization = _eligible()
        organization.get_events()

        organization.verify()

        assert organization.is_verified
        assert organization.verification_date is not None
        assert organization.status == OrganizationStatus.ACTIVE
        assert [type(event) for event in organization.get_events()] == [OrganizationVerified]

    @pytest.mark.parametrize("missing", ["registration_number", "tax_id", "email", "category"])
    def test_missing_details_block_verification(self, missing):
        organization = _eligible(**{missing: None})

        assert not organization.is_eligible_for_verification()
        with pytest.raises(OrganizationException) as exc_info:
            organization.verify()

        assert exc_info.value.code == "not_eligible_for_verification"
        assert exc_info.value.status_code == 422
        assert not organization.is_verified

    def test_placeholder_name_is_not_eligible(self):
        organization = Organization.create(
            TranslatableText({"en": "Unnamed Organization"}),
            registration_number="RC-1", tax_id="TX-1", email=Email("a@acme.org"), category="health",
        )
        assert not organization.is_eligible_for_verification()

    def test_inactive_organization_is_not_eligible(self):
        organization = _eligible()
        organization.deactivate()

        assert organization.status == OrganizationStatus.INACTIVE
        assert not organization.is_eligible_for_verification()


class TestTransitionsIntoCurrentState:

    def test_verify_twice(self):
        organization = _eligible()
        organization.verify()

        with pytest.raises(OrganizationException) as exc_info:
            organization.verify()

        assert exc_info.value.code == "already_verified"
        assert exc_info.value.status_code == 409

    @pytest.mark.parametrize("action,code", [
        ("activate", "already_active"),
        ("unverify", "not_verified"),
    ])
    def test_fresh_organization(self, action, code):
        organization = _eligible()

        with pytest.raises(OrganizationException) as exc_info:
            getattr(organization, action)()

        assert exc_info.value.code == code

    def test_deactivate_twice(self):
        organization = _eligible()
        organization.deactivate()

        with pytest.raises(OrganizationException) as exc_info:
            organization.deactivate()

        assert exc_info.value.code == "already_inactive"
