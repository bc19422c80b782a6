"""
Data masking engine.

Redacts PII/PHI in strings and nested data before it is logged, audited, or
shown to a less privileged user. Masking is best effort: a value in an
unrecognized format is returned unchanged, and nothing here raises on
malformed input.
"""

import copy
import logging
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any

from revcycle.domain.enums.security import MaskingLevel, UserRole
from revcycle.domain.value_objects.masking import (
    REDACTED,
    MaskingOptions,
    MaskingRule,
    SensitiveDataReport,
)
from revcycle.infrastructure.security.masking.patterns import (
    CARD_DIGITS,
    CREDIT_CARD_FORMAT,
    DATE_OF_BIRTH_FORMAT,
    DEFAULT_MASKING_RULES,
    DEFAULT_MASKING_RULES_VERSION,
    EMAIL_FORMAT,
    ISO_DATE,
    PHONE_DIGITS,
    PHONE_FORMAT,
    PHONE_SEPARATORS,
    SCAN_CREDIT_CARD,
    SCAN_DATE,
    SCAN_PHONE,
    SCAN_SSN,
    SENSITIVE_KEY_PATTERNS,
    SSN_DIGITS,
    SSN_FORMAT,
    SSN_SEPARATORS,
    STREET_PREFIX,
    TRAILING_ZIP,
    US_DATE,
    ZIP_CODE,
)

logger = logging.getLogger(__name__)

MASKED_STREET = "XXXXX"

# Fields masked for roles that see partially masked data
PARTIAL_MASK_FIELDS = (
    "ssn",
    "socialSecurityNumber",
    "creditCard",
    "cardNumber",
    "dateOfBirth",
    "birthdate",
    "dob",
    "address.street1",
    "address.street2",
    "street1",
    "street2",
    "email",
    "emailAddress",
    "phone",
    "phoneNumber",
    "mobilePhone",
    "medicaid_id",
    "medicaidId",
    "medicare_id",
    "medicareId",
)

# Record fields naming the user a record belongs to
OWNER_FIELDS = ("userId", "createdBy", "ownerId", "user_id", "created_by", "owner_id")

FULL_ACCESS_ROLES = frozenset({UserRole.ADMINISTRATOR.value, "admin"})
PARTIAL_ACCESS_ROLES = frozenset(
    {UserRole.FINANCIAL_MANAGER.value, UserRole.BILLING_SPECIALIST.value}
)

_IDENTIFIER_TOKENS = (
    "medicaid",
    "medicare",
    "insuranceid",
    "medicalrecord",
    "mrn",
    "driverslicense",
)


def mask_ssn(ssn: Any) -> Any:
    """Mask a social security number, keeping the last four digits: ``XXX-XX-6789``."""
    if not isinstance(ssn, str):
        return ssn
    digits = SSN_SEPARATORS.sub("", ssn)
    if not SSN_DIGITS.match(digits):
        return ssn
    return f"XXX-XX-{digits[-4:]}"


def mask_credit_card(card_number: Any) -> Any:
    """Mask a card number, keeping the last four digits."""
    if not isinstance(card_number, str):
        return card_number
    digits = SSN_SEPARATORS.sub("", card_number)
    if not CARD_DIGITS.match(digits):
        return card_number
    if len(digits) == 16:
        return f"XXXX-XXXX-XXXX-{digits[-4:]}"
    return "X" * (len(digits) - 4) + digits[-4:]


def mask_date_of_birth(date_of_birth: Any) -> Any:
    """Mask a date of birth down to its year. Unrecognized formats are left as is."""
    if not isinstance(date_of_birth, str):
        return date_of_birth
    iso = ISO_DATE.match(date_of_birth)
    if iso:
        return f"{iso.group(1)}-XX-XX"
    us = US_DATE.match(date_of_birth)
    if us:
        return f"XX/XX/{us.group(3)}"
    return date_of_birth


def mask_email(email: Any) -> Any:
    """Mask an email address, keeping the first character of the local part and the domain."""
    if not isinstance(email, str) or not EMAIL_FORMAT.match(email):
        return email
    local, domain = email.split("@", 1)
    return f"{local[0]}{'*' * max(len(local) - 1, 3)}@{domain}"


def mask_phone(phone: Any) -> Any:
    """Mask a phone number, keeping the last four digits: ``(XXX) XXX-4567``."""
    if not isinstance(phone, str):
        return phone
    digits = PHONE_SEPARATORS.sub("", phone)
    if not PHONE_DIGITS.match(digits):
        return phone
    return f"(XXX) XXX-{digits[-4:]}"


def _mask_zip(zip_code: Any) -> Any:
    if not isinstance(zip_code, str):
        return zip_code
    match = ZIP_CODE.match(zip_code.strip())
    return f"{match.group(1)}XX" if match else zip_code


def mask_address(address: Any) -> Any:
    """
    Mask an address, keeping city and state.

    Structured addresses have their street lines replaced and their ZIP code
    reduced to its first three digits. Single-line addresses have everything
    before the first comma replaced and a trailing ZIP code reduced likewise.
    """
    if isinstance(address, dict):
        masked = dict(address)
        for key, value in address.items():
            name = _normalize(key)
            if value is None:
                continue
            if name.startswith(("street", "line", "addressline")):
                masked[key] = MASKED_STREET
            elif name in ("zip", "zipcode", "postalcode", "postcode"):
                masked[key] = _mask_zip(value)
        return masked
    if isinstance(address, str):
        masked = STREET_PREFIX.sub(f"{MASKED_STREET},", address, count=1)
        return TRAILING_ZIP.sub(r"\1XX", masked)
    return address


def mask_identifier(identifier: Any, identifier_type: str | None = None) -> Any:
    """
    Mask an identifier of a known or detected type.

    Args:
        identifier: The value to mask
        identifier_type: One of ``ssn``, ``credit_card``, ``date_of_birth``,
            ``email``, ``phone``; detected from the value when omitted

    Returns:
        The masked identifier. Unknown identifiers keep their first and last
        two characters.
    """
    if not isinstance(identifier, str) or not identifier:
        return identifier

    if identifier_type is None:
        identifier_type = _detect_format(identifier)
    masker = _FORMAT_MASKERS.get(identifier_type) if identifier_type else None
    if masker is not None:
        return masker(identifier)

    if len(identifier) <= 4:
        return "X" * len(identifier)
    return identifier[:2] + "X" * (len(identifier) - 4) + identifier[-2:]


def _detect_format(value: str) -> str | None:
    if SSN_FORMAT.match(value):
        return "ssn"
    if CREDIT_CARD_FORMAT.match(value):
        return "credit_card"
    if DATE_OF_BIRTH_FORMAT.match(value):
        return "date_of_birth"
    if EMAIL_FORMAT.match(value):
        return "email"
    if PHONE_FORMAT.match(value):
        return "phone"
    return None


_FORMAT_MASKERS: dict[str, Callable[[Any], Any]] = {
    "ssn": mask_ssn,
    "credit_card": mask_credit_card,
    "date_of_birth": mask_date_of_birth,
    "email": mask_email,
    "phone": mask_phone,
}


def _normalize(field_name: str) -> str:
    return str(field_name).lower().replace("_", "").replace("-", "")


def _street_line(value: Any) -> Any:
    return MASKED_STREET if isinstance(value, str) and value else value


def _masker_for_field(field_name: str | None) -> Callable[[Any], Any] | None:
    """Pick a specialized masker from a field name, or None if the name is not recognized."""
    if not field_name:
        return None
    name = _normalize(field_name)
    if "ssn" in name or "socialsecurity" in name:
        return mask_ssn
    if "creditcard" in name or "cardnumber" in name:
        return mask_credit_card
    if "dob" in name or "dateofbirth" in name or "birthdate" in name:
        return mask_date_of_birth
    if "email" in name:
        return mask_email
    if "phone" in name or "telephone" in name or "mobile" in name:
        return mask_phone
    if name.startswith(("street", "addressline")):
        return _street_line
    if "address" in name and not name.startswith("ip"):
        return mask_address
    if any(token in name for token in _IDENTIFIER_TOKENS):
        return mask_identifier
    return None


def _role_name(role: Any) -> str:
    return str(role.value if isinstance(role, Enum) else role).lower()


class DataMasker:
    """
    Masks sensitive values using field-name heuristics, format detectors and
    an injected table of substring rules.
    """

    def __init__(
        self,
        rules: Iterable[MaskingRule] = DEFAULT_MASKING_RULES,
        rules_version: str = DEFAULT_MASKING_RULES_VERSION,
    ):
        self.rules = tuple(rules)
        self.rules_version = rules_version
        logger.debug(
            f"Data masker initialized with {len(self.rules)} rules (version {rules_version})"
        )

    def apply_masking_rules(self, text: str) -> str:
        """Replace every substring matched by the rule table."""
        for rule in self.rules:
            text = rule.apply(text)
        return text

    def _redact(self, value: str, options: MaskingOptions) -> str:
        if options.preserve_length:
            return options.mask_char * len(value)
        return REDACTED

    def _mask_string(self, value: str, field_name: str | None, options: MaskingOptions) -> str:
        if options.level == MaskingLevel.NONE:
            return value
        if options.level == MaskingLevel.FULL:
            return self._redact(value, options)

        masker = _masker_for_field(field_name)
        if masker is None:
            detected = _detect_format(value)
            masker = _FORMAT_MASKERS[detected] if detected else None

        masked = masker(value) if masker is not None else value
        if masked == value:
            masked = self.apply_masking_rules(value)
        return masked

    def _mask_value(self, value: Any, field_name: str | None, options: MaskingOptions) -> Any:
        if isinstance(value, str):
            return self._mask_string(value, field_name, options)
        if isinstance(value, dict):
            if (
                options.level == MaskingLevel.PARTIAL
                and _masker_for_field(field_name) is mask_address
            ):
                value = mask_address(value)
            return {
                key: item if key in options.exceptions else self._mask_value(item, key, options)
                for key, item in value.items()
            }
        if isinstance(value, (list, tuple)):
            return type(value)(self._mask_value(item, field_name, options) for item in value)
        return value

    def mask_data(self, data: Any, options: MaskingOptions | None = None) -> Any:
        """
        Mask sensitive values anywhere in ``data``.

        The input is never modified. Strings are matched against the SSN,
        card, date of birth, email and phone formats before the rule table is
        applied; mapping values are additionally masked according to their
        field name. At ``FULL`` every string is replaced.

        Args:
            data: A string, mapping, sequence, or any other value
            options: Masking options; partial masking by default

        Returns:
            A masked deep copy of ``data``
        """
        options = options or MaskingOptions()
        if data is None:
            return None
        if options.level == MaskingLevel.NONE:
            return copy.deepcopy(data)
        return self._mask_value(copy.deepcopy(data), None, options)

    def mask_sensitive_fields(
        self, data: Any, fields: Iterable[str], options: MaskingOptions | None = None
    ) -> Any:
        """
        Mask only the listed fields of a mapping.

        Args:
            data: The mapping to mask; any other value is returned as a copy
            fields: Field names, with dots for nested fields (``address.street1``)
            options: Masking options; partial masking by default

        Returns:
            A masked deep copy of ``data``
        """
        options = options or MaskingOptions()
        result = copy.deepcopy(data)
        if not isinstance(result, dict) or options.level == MaskingLevel.NONE:
            return result

        for path in fields:
            *parents, key = path.split(".")
            target = result
            for part in parents:
                target = target.get(part) if isinstance(target, dict) else None
            if not isinstance(target, dict) or key in options.exceptions:
                continue
            if target.get(key) is None:
                continue
            target[key] = self._mask_value(target[key], key, options)

        return result

    def resolve_masking_level(
        self, data: Any, user_id: str | None, user_roles: Iterable[Any] | None
    ) -> MaskingLevel:
        """
        Decide how much of ``data`` a user may see.

        Administrators see everything, financial managers and billing
        specialists see partially masked data, and everyone else sees fully
        masked data, except that a user always sees their own records
        partially masked.
        """
        roles = {_role_name(role) for role in user_roles or []}
        if roles & FULL_ACCESS_ROLES:
            level = MaskingLevel.NONE
        elif roles & PARTIAL_ACCESS_ROLES:
            level = MaskingLevel.PARTIAL
        else:
            level = MaskingLevel.FULL

        if (
            level == MaskingLevel.FULL
            and user_id
            and isinstance(data, dict)
            and any(data.get(field) == user_id for field in OWNER_FIELDS)
        ):
            level = MaskingLevel.PARTIAL

        return level

    def apply_role_based_masking(
        self,
        data: Any,
        user_id: str | None,
        user_roles: Iterable[Any] | None,
        options: MaskingOptions | None = None,
    ) -> Any:
        """
        Mask data according to the requesting user's roles.

        Lists are masked record by record so ownership is decided per record.
        """
        if isinstance(data, list):
            return [
                self.apply_role_based_masking(item, user_id, user_roles, options) for item in data
            ]

        level = self.resolve_masking_level(data, user_id, user_roles)
        options = (options or MaskingOptions()).model_copy(update={"level": level})

        if level == MaskingLevel.NONE:
            return copy.deepcopy(data)
        if level == MaskingLevel.PARTIAL and isinstance(data, dict):
            return self.mask_sensitive_fields(data, PARTIAL_MASK_FIELDS, options)
        return self.mask_data(data, options)

    def detect_sensitive_data(self, data: Any) -> SensitiveDataReport:
        """
        Scan data for sensitive values without masking anything.

        Fields are flagged when their name looks sensitive or their value has
        a recognized sensitive format. Nested fields are reported with dotted
        paths and list items as ``field[i]``.
        """
        report = SensitiveDataReport()
        self._scan(data, "", False, report)
        report.has_sensitive_data = bool(report.detected_fields)
        return report

    def _scan(self, value: Any, path: str, key_sensitive: bool, report: SensitiveDataReport) -> None:
        if isinstance(value, dict):
            for key, item in value.items():
                item_path = f"{path}.{key}" if path else str(key)
                sensitive = any(pattern.search(str(key)) for pattern in SENSITIVE_KEY_PATTERNS)
                self._scan(item, item_path, sensitive, report)
        elif isinstance(value, (list, tuple)):
            for index, item in enumerate(value):
                self._scan(item, f"{path}[{index}]", key_sensitive, report)
        elif isinstance(value, str) and path:
            detected = _classify(value, key_sensitive)
            if detected:
                report.detected_fields.append(path)
                report.field_types[path] = detected


def _classify(value: str, key_sensitive: bool) -> str | None:
    if SCAN_SSN.match(value):
        return "SSN"
    if SCAN_CREDIT_CARD.match(value):
        return "Credit Card"
    if key_sensitive and SCAN_DATE.match(value):
        return "Date of Birth"
    if EMAIL_FORMAT.match(value):
        return "Email"
    if SCAN_PHONE.match(value):
        return "Phone"
    if key_sensitive:
        return "Potential Sensitive Data"
    return None
