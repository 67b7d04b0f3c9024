"""Validation of the consolidated delivery address."""

from __future__ import annotations

import re
from typing import Any
from typing import Mapping
from typing import Optional
from typing import Union

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import field_validator

POSTAL_CODE_LENGTH = 4
POSTAL_CODE_PATTERN = re.compile(r"^\d{4}$")

ADDRESS_FIELDS = ("region", "province", "city", "barangay")


def sanitize_postal_code(value: Optional[Any]) -> str:
    """Keep digits only, truncated to the postal code length."""
    if value is None:
        return ""
    digits = re.sub(r"[^0-9]", "", str(value))
    return digits[:POSTAL_CODE_LENGTH]


class AddressValue(BaseModel):
    """Address strings reported by the selection form."""

    model_config = ConfigDict(frozen=True)

    region: str = ""
    province: str = ""
    city: str = ""
    barangay: str = ""
    postal_code: str = ""

    @field_validator("region", "province", "city", "barangay", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("postal_code", mode="before")
    @classmethod
    def _clean_postal_code(cls, v: Any) -> str:
        return sanitize_postal_code(v)


class AddressValidation(BaseModel):
    """Per-field error flags, plus the first field in error."""

    errors: dict[str, bool]
    first_error: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.first_error is None


def validate_address(
    value: Union[AddressValue, Mapping[str, Any]],
    require_postal_code: bool = False,
) -> AddressValidation:
    """Flag blank address levels and, optionally, a bad postal code.

    Args:
        value: Consolidated address, as an AddressValue or a mapping such
            as the one passed to a SelectionMachine change callback.
        require_postal_code: Whether a 4-digit postal code is mandatory.

    Returns:
        The validation outcome; fields are checked region first.
    """
    if not isinstance(value, AddressValue):
        value = AddressValue.model_validate(dict(value))

    errors = {field: not getattr(value, field).strip() for field in ADDRESS_FIELDS}
    if require_postal_code:
        errors["postal_code"] = not POSTAL_CODE_PATTERN.match(value.postal_code)

    first_error = next((field for field, bad in errors.items() if bad), None)
    return AddressValidation(errors=errors, first_error=first_error)
