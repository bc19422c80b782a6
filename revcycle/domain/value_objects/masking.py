"""Value objects used by the masking engine."""

import re
from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from revcycle.domain.enums.security import MaskingLevel

REDACTED = "[REDACTED]"


@dataclass(frozen=True)
class MaskingRule:
    """A regular expression and the fixed text that replaces each of its matches."""

    name: str
    pattern: str
    replacement: str
    flags: int = 0
    regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "regex", re.compile(self.pattern, self.flags))

    def apply(self, text: str) -> str:
        return self.regex.sub(self.replacement, text)


class MaskingOptions(BaseModel):
    """Controls how aggressively values are masked."""

    level: MaskingLevel = MaskingLevel.PARTIAL
    preserve_length: bool = False
    mask_char: str = Field(default="X", min_length=1, max_length=1)
    # Field names that are never masked
    exceptions: list[str] = Field(default_factory=list)


class SensitiveDataReport(BaseModel):
    """Result of scanning data for unmasked sensitive fields."""

    has_sensitive_data: bool = False
    detected_fields: list[str] = Field(default_factory=list)
    field_types: dict[str, str] = Field(default_factory=dict)
