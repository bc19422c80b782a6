"""
Sensitive data patterns.

Format detectors recognize a whole value as a known kind of PII/PHI. The
masking rule table replaces matching substrings inside free text and is
handed to ``DataMasker`` at construction, so deployments can supply their own.
"""

import re

from revcycle.domain.value_objects.masking import MaskingRule

DEFAULT_MASKING_RULES_VERSION = "1"

# Whole-value format detectors, checked in this order
SSN_FORMAT = re.compile(r"^\d{3}-\d{2}-\d{4}$")
CREDIT_CARD_FORMAT = re.compile(r"^\d{4}[- ]?\d{4}[- ]?\d{4}[- ]?\d{4}$")
DATE_OF_BIRTH_FORMAT = re.compile(r"^\d{4}-\d{2}-\d{2}$|^\d{2}/\d{2}/\d{4}$")
EMAIL_FORMAT = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_FORMAT = re.compile(r"^\(\d{3}\) \d{3}-\d{4}$|^\d{3}-\d{3}-\d{4}$")

# Inputs accepted by the specialized maskers
SSN_DIGITS = re.compile(r"^\d{9}$")
CARD_DIGITS = re.compile(r"^\d{13,19}$")
ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
US_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
PHONE_DIGITS = re.compile(r"^\+?\d{10,15}$")
ZIP_CODE = re.compile(r"^(\d{3})\d{2}(?:-\d{4})?$")
TRAILING_ZIP = re.compile(r"\b(\d{3})\d{2}(?:-\d{4})?$")
STREET_PREFIX = re.compile(r"^[^,]+,")

SSN_SEPARATORS = re.compile(r"[- ]")
PHONE_SEPARATORS = re.compile(r"[().\-\s]")

# Formats used by the sensitive data scanner, which is more lenient than the maskers
SCAN_SSN = re.compile(r"^\d{3}-\d{2}-\d{4}$|^\d{9}$")
SCAN_CREDIT_CARD = re.compile(r"^\d{13,19}$|^(?:\d{4}[- ]){3}\d{4}$")
SCAN_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$|^\d{1,2}/\d{1,2}/\d{4}$")
SCAN_PHONE = re.compile(r"^(?:\+?1[-. ]?)?\(?\d{3}\)?[-. ]?\d{3}[-. ]?\d{4}$")

SENSITIVE_KEY_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"ssn",
        r"social.*security",
        r"tax.*id",
        r"credit.*card",
        r"card.*number",
        r"cvv",
        r"cvc",
        r"birth.*date",
        r"date.*of.*birth",
        r"dob",
        r"email",
        r"phone",
        r"mobile",
        r"telephone",
        r"address",
        r"street",
        r"password",
        r"secret",
        r"token",
        r"medicaid.*id",
        r"medicare.*id",
        r"diagnosis",
        r"condition",
        r"treatment",
    )
)

DEFAULT_MASKING_RULES: tuple[MaskingRule, ...] = (
    MaskingRule("ssn", r"\b\d{3}-\d{2}-\d{4}\b", "XXX-XX-XXXX"),
    MaskingRule("credit_card", r"\b(?:\d{4}[- ]?){3}\d{4}\b", "XXXX-XXXX-XXXX-XXXX"),
    MaskingRule(
        "date_of_birth",
        r"\b(dob|date of birth|birth\s*date)\s*[:=]?\s*\d{1,4}[-/]\d{1,2}[-/]\d{1,4}\b",
        r"\1: XXXX-XX-XX",
        re.IGNORECASE,
    ),
    MaskingRule("email", r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b", "[EMAIL REDACTED]"),
    MaskingRule(
        "phone",
        r"(?:\+1[-. ]?)?(?:\(\d{3}\)\s?|\b\d{3}[-. ])\d{3}[-. ]\d{4}\b",
        "(XXX) XXX-XXXX",
    ),
    MaskingRule(
        "street_address",
        r"\b\d{1,6}\s+(?:[A-Za-z0-9]+\s+){1,4}"
        r"(?:Street|St|Avenue|Ave|Road|Rd|Drive|Dr|Lane|Ln|Boulevard|Blvd|Court|Ct|Way|Place|Pl|"
        r"Terrace|Ter|Circle|Cir|Parkway|Pkwy)\b\.?",
        "[ADDRESS REDACTED]",
        re.IGNORECASE,
    ),
    MaskingRule("ip_address", r"\b(?:\d{1,3}\.){3}\d{1,3}\b", "XXX.XXX.XXX.XXX"),
    MaskingRule(
        "bearer_token",
        r"\bBearer\s+[A-Za-z0-9\-._~+/]{8,}=*",
        "Bearer [TOKEN REDACTED]",
        re.IGNORECASE,
    ),
    MaskingRule(
        "medicaid_medicare_id",
        r"\b(medicaid|medicare)\s*(?:id|number|no\.?|#)\s*[:#]?\s*[A-Za-z0-9-]{4,}",
        r"\1 ID: [REDACTED]",
        re.IGNORECASE,
    ),
    MaskingRule(
        "clinical_text",
        r"\b(diagnosis|treatment|condition)\s*:\s*[^,;\n]+",
        r"\1: [REDACTED]",
        re.IGNORECASE,
    ),
)
