"""
Tests for the data masking engine.

Covers the individual maskers, recursive masking of nested data, masking
levels, role-based masking and sensitive data detection.
"""

import pytest

from revcycle.domain.enums.security import MaskingLevel, UserRole
from revcycle.domain.value_objects.masking import REDACTED, MaskingOptions, MaskingRule
from revcycle.infrastructure.security.masking.data_masking import (
    DataMasker,
    mask_address,
    mask_credit_card,
    mask_date_of_birth,
    mask_email,
    mask_identifier,
    mask_phone,
    mask_ssn,
)

USER_ID = "user-123"


@pytest.fixture
def patient_record():
    return {
        "id": "client-1",
        "firstName": "John",
        "ssn": "123-45-6789",
        "email": "john.doe@example.com",
        "phone": "(555) 123-4567",
        "dateOfBirth": "1985-07-04",
        "notes": "Patient SSN 987-65-4321 called from 555-987-6543",
        "visits": 3,
    }


class TestFieldMaskers:
    """Test suite for the single-value masking functions."""

    def test_mask_ssn(self) -> None:
        assert mask_ssn("123-45-6789") == "XXX-XX-6789"
        assert mask_ssn("123456789") == "XXX-XX-6789"

    def test_mask_ssn_leaves_unrecognized_values(self) -> None:
        assert mask_ssn("12-34") == "12-34"
        assert mask_ssn(None) is None

    def test_mask_credit_card(self) -> None:
        assert mask_credit_card("4111-1111-1111-1111") == "XXXX-XXXX-XXXX-1111"
        assert mask_credit_card("4111 1111 1111 1111") == "XXXX-XXXX-XXXX-1111"
        assert mask_credit_card("378282246310005") == "XXXXXXXXXXX0005"

    def test_mask_date_of_birth_keeps_year(self) -> None:
        assert mask_date_of_birth("1985-07-04") == "1985-XX-XX"
        assert mask_date_of_birth("07/04/1985") == "XX/XX/1985"

    def test_mask_date_of_birth_fails_open(self) -> None:
        assert mask_date_of_birth("July 4th") == "July 4th"

    def test_mask_email(self) -> None:
        assert mask_email("john.doe@example.com") == "j*******@example.com"
        assert mask_email("jo@example.org") == "j***@example.org"
        assert mask_email("not-an-email") == "not-an-email"

    def test_mask_phone(self) -> None:
        assert mask_phone("555-123-4567") == "(XXX) XXX-4567"
        assert mask_phone("+1 (555) 123-4567") == "(XXX) XXX-4567"
        assert mask_phone("12345") == "12345"

    def test_mask_structured_address(self) -> None:
        address = {
            "street1": "123 Main St",
            "street2": "Apt 4",
            "city": "Springfield",
            "state": "IL",
            "zipCode": "62704",
        }

        masked = mask_address(address)

        assert masked == {
            "street1": "XXXXX",
            "street2": "XXXXX",
            "city": "Springfield",
            "state": "IL",
            "zipCode": "627XX",
        }
        assert address["street1"] == "123 Main St"

    def test_mask_single_line_address(self) -> None:
        assert (
            mask_address("123 Main St, Springfield, IL 62704")
            == "XXXXX, Springfield, IL 627XX"
        )

    def test_mask_identifier_detects_format(self) -> None:
        assert mask_identifier("123-45-6789") == "XXX-XX-6789"
        assert mask_identifier("555-123-4567", "phone") == "(XXX) XXX-4567"

    def test_mask_identifier_generic(self) -> None:
        assert mask_identifier("MCD123456789") == "MCXXXXXXXX89"
        assert mask_identifier("abc") == "XXX"
        assert mask_identifier("") == ""


class TestDataMasker:
    """Test suite for recursive masking."""

    def test_masks_fields_by_name_and_free_text(self, masker, patient_record) -> None:
        masked = masker.mask_data(patient_record)

        assert masked["firstName"] == "John"
        assert masked["ssn"] == "XXX-XX-6789"
        assert masked["email"] == "j*******@example.com"
        assert masked["phone"] == "(XXX) XXX-4567"
        assert masked["dateOfBirth"] == "1985-XX-XX"
        assert masked["notes"] == "Patient SSN XXX-XX-XXXX called from (XXX) XXX-XXXX"
        assert masked["visits"] == 3

    def test_input_is_not_modified(self, masker, patient_record) -> None:
        masker.mask_data(patient_record)

        assert patient_record["ssn"] == "123-45-6789"
        assert patient_record["email"] == "john.doe@example.com"

    def test_masking_is_idempotent(self, masker, patient_record) -> None:
        masked = masker.mask_data(patient_record)

        assert masker.mask_data(masked) == masked

    def test_masks_nested_structures(self, masker) -> None:
        data = {
            "client": {"contact": {"email": "a.b@example.com"}},
            "phones": ["555-123-4567", "555-987-6543"],
        }

        masked = masker.mask_data(data)

        assert masked["client"]["contact"]["email"] == "a***@example.com"
        assert masked["phones"] == ["(XXX) XXX-4567", "(XXX) XXX-6543"]

    def test_masks_free_text_string(self, masker) -> None:
        masked = masker.mask_data("Contact john@example.com or 555-123-4567")

        assert masked == "Contact [EMAIL REDACTED] or (XXX) XXX-XXXX"

    def test_none_and_non_string_values(self, masker) -> None:
        assert masker.mask_data(None) is None
        assert masker.mask_data({"age": 42, "active": True, "balance": None}) == {
            "age": 42,
            "active": True,
            "balance": None,
        }

    def test_full_level_redacts_every_string(self, masker) -> None:
        options = MaskingOptions(level=MaskingLevel.FULL)

        masked = masker.mask_data({"name": "John", "ssn": "123-45-6789", "visits": 3}, options)

        assert masked == {"name": REDACTED, "ssn": REDACTED, "visits": 3}

    def test_full_level_preserves_length(self, masker) -> None:
        options = MaskingOptions(level=MaskingLevel.FULL, preserve_length=True, mask_char="*")

        assert masker.mask_data({"name": "John"}, options) == {"name": "****"}

    def test_none_level_returns_copy(self, masker, patient_record) -> None:
        masked = masker.mask_data(patient_record, MaskingOptions(level=MaskingLevel.NONE))

        assert masked == patient_record
        assert masked is not patient_record

    def test_exceptions_are_left_unmasked(self, masker, patient_record) -> None:
        masked = masker.mask_data(patient_record, MaskingOptions(exceptions=["email"]))

        assert masked["email"] == "john.doe@example.com"
        assert masked["ssn"] == "XXX-XX-6789"

    def test_injected_rules_replace_defaults(self) -> None:
        masker = DataMasker(
            rules=[MaskingRule("account", r"ACCT-\d+", "ACCT-XXXX")], rules_version="custom"
        )

        assert masker.rules_version == "custom"
        assert masker.mask_data("Ref ACCT-12345") == "Ref ACCT-XXXX"
        assert masker.mask_data("note 123-45-6789") == "note 123-45-6789"

    def test_mask_sensitive_fields_only_touches_listed_fields(self, masker) -> None:
        data = {
            "ssn": "123-45-6789",
            "address": {"street1": "123 Main St", "city": "Springfield"},
            "firstName": "John",
        }

        masked = masker.mask_sensitive_fields(data, ["ssn", "address.street1", "missing.path"])

        assert masked == {
            "ssn": "XXX-XX-6789",
            "address": {"street1": "XXXXX", "city": "Springfield"},
            "firstName": "John",
        }
        assert data["address"]["street1"] == "123 Main St"


class TestRoleBasedMasking:
    """Test suite for masking by the requesting user's roles."""

    def test_administrator_sees_everything(self, masker, patient_record) -> None:
        masked = masker.apply_role_based_masking(patient_record, USER_ID, ["administrator"])

        assert masked == patient_record

    def test_enum_roles_are_accepted(self, masker) -> None:
        level = masker.resolve_masking_level({}, USER_ID, [UserRole.ADMINISTRATOR])

        assert level == MaskingLevel.NONE

    def test_billing_specialist_sees_partial(self, masker, patient_record) -> None:
        masked = masker.apply_role_based_masking(
            patient_record, USER_ID, [UserRole.BILLING_SPECIALIST.value]
        )

        assert masked["ssn"] == "XXX-XX-6789"
        assert masked["email"] == "j*******@example.com"
        assert masked["firstName"] == "John"

    def test_other_roles_see_fully_masked(self, masker, patient_record) -> None:
        masked = masker.apply_role_based_masking(patient_record, USER_ID, ["read_only"])

        assert masked["firstName"] == REDACTED
        assert masked["ssn"] == REDACTED
        assert masked["visits"] == 3

    def test_no_roles_sees_fully_masked(self, masker) -> None:
        assert masker.resolve_masking_level({}, USER_ID, None) == MaskingLevel.FULL

    def test_owner_sees_own_record_partially_masked(self, masker, patient_record) -> None:
        own_record = {**patient_record, "userId": USER_ID}

        masked = masker.apply_role_based_masking(own_record, USER_ID, ["read_only"])

        assert masked["firstName"] == "John"
        assert masked["ssn"] == "XXX-XX-6789"

    def test_lists_are_masked_per_record(self, masker, patient_record) -> None:
        records = [
            {**patient_record, "createdBy": USER_ID},
            {**patient_record, "createdBy": "someone-else"},
        ]

        masked = masker.apply_role_based_masking(records, USER_ID, ["program_manager"])

        assert masked[0]["firstName"] == "John"
        assert masked[1]["firstName"] == REDACTED


class TestSensitiveDataDetection:
    """Test suite for scanning data without masking it."""

    def test_detects_fields_by_value_and_name(self, masker) -> None:
        data = {
            "ssn": "123-45-6789",
            "name": "John",
            "contact": {"email": "a@b.com", "phone": "555-123-4567"},
            "dob": "1990-01-01",
            "password": "hunter2",
            "tags": ["x"],
        }

        report = masker.detect_sensitive_data(data)

        assert report.has_sensitive_data is True
        assert report.detected_fields == [
            "ssn",
            "contact.email",
            "contact.phone",
            "dob",
            "password",
        ]
        assert report.field_types == {
            "ssn": "SSN",
            "contact.email": "Email",
            "contact.phone": "Phone",
            "dob": "Date of Birth",
            "password": "Potential Sensitive Data",
        }

    def test_clean_data(self, masker) -> None:
        report = masker.detect_sensitive_data({"name": "John", "count": "5"})

        assert report.has_sensitive_data is False
        assert report.detected_fields == []
