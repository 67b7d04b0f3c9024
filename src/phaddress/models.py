"""Pydantic models for location nodes and form selection state."""

from __future__ import annotations

import enum
from typing import Any
from typing import ClassVar
from typing import Optional
from typing import Tuple
from typing import Union

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

from phaddress.exceptions import ValidationError


class LocationLevel(str, enum.Enum):
    """Administrative levels, shallowest first."""

    REGION = "region"
    PROVINCE = "province"
    CITY = "city"
    BARANGAY = "barangay"

    @classmethod
    def parse(cls, value: Union["LocationLevel", str]) -> "LocationLevel":
        """Parse a level tag, raising ValidationError for unknown tags."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower().strip())
        except ValueError as e:
            raise ValidationError(f"Unknown location level: {value}", field="level") from e

    @property
    def depth(self) -> int:
        return LEVELS.index(self)

    @property
    def parent(self) -> Optional["LocationLevel"]:
        """The level one above, or None for regions."""
        return LEVELS[self.depth - 1] if self.depth > 0 else None

    @property
    def child(self) -> Optional["LocationLevel"]:
        """The level one below, or None for barangays."""
        return LEVELS[self.depth + 1] if self.depth + 1 < len(LEVELS) else None

    def deeper(self) -> Tuple["LocationLevel", ...]:
        """All levels strictly below this one."""
        return LEVELS[self.depth + 1 :]


LEVELS: Tuple[LocationLevel, ...] = tuple(LocationLevel)


class LocationNode(BaseModel):
    """Common shape of every level in the hierarchy."""

    model_config = ConfigDict(frozen=True)

    level: ClassVar[LocationLevel]

    id: str
    code: str
    name: str
    psgc_code: Optional[str] = None

    @property
    def parent_code(self) -> Optional[str]:
        """Code of the owning node one level up."""
        return None


class Region(LocationNode):
    """Top-level administrative region."""

    level: ClassVar[LocationLevel] = LocationLevel.REGION


class Province(LocationNode):
    """Province within a region."""

    level: ClassVar[LocationLevel] = LocationLevel.PROVINCE

    region_code: str

    @property
    def parent_code(self) -> Optional[str]:
        return self.region_code


class City(LocationNode):
    """City or municipality within a province."""

    level: ClassVar[LocationLevel] = LocationLevel.CITY

    province_code: str
    region_code: Optional[str] = None
    postal_code: Optional[str] = None

    @property
    def parent_code(self) -> Optional[str]:
        return self.province_code


class Barangay(LocationNode):
    """Barangay within a city or municipality."""

    level: ClassVar[LocationLevel] = LocationLevel.BARANGAY

    city_code: str
    province_code: Optional[str] = None
    region_code: Optional[str] = None

    @property
    def parent_code(self) -> Optional[str]:
        return self.city_code


AnyLocation = Union[Region, Province, City, Barangay]


class PostalCode(BaseModel):
    """Postal code candidate derived from the city dataset."""

    model_config = ConfigDict(frozen=True)

    id: str
    code: str
    name: str
    city: str
    municipality: str
    region: Optional[str] = None


class LookupStatus(str, enum.Enum):
    """Why a candidate list has the contents it has."""

    NOT_APPLICABLE = "not_applicable"
    EMPTY = "empty"
    RESULTS = "results"


class ChildLookup(BaseModel):
    """Candidate list that distinguishes "no parent" from "no matches"."""

    model_config = ConfigDict(frozen=True)

    status: LookupStatus
    items: Tuple[AnyLocation, ...] = ()

    @classmethod
    def not_applicable(cls) -> "ChildLookup":
        return cls(status=LookupStatus.NOT_APPLICABLE)

    @classmethod
    def from_items(cls, items: Tuple[AnyLocation, ...]) -> "ChildLookup":
        if not items:
            return cls(status=LookupStatus.EMPTY)
        return cls(status=LookupStatus.RESULTS, items=items)


class PartialSelection(BaseModel):
    """Initial form values as plain strings, without resolved nodes."""

    model_config = ConfigDict(frozen=True)

    region: str = ""
    province: str = ""
    city: str = ""
    barangay: str = ""

    @field_validator("region", "province", "city", "barangay", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class SlotState(BaseModel):
    """State of one level of the address form."""

    model_config = ConfigDict(frozen=True)

    text_value: str = ""
    resolved_node: Optional[AnyLocation] = None
    query: str = ""

    @property
    def is_resolved(self) -> bool:
        return self.resolved_node is not None


EMPTY_SLOT = SlotState()


class SelectionState(BaseModel):
    """Four-slot state of one address form instance."""

    model_config = ConfigDict(frozen=True)

    region: SlotState = Field(default_factory=SlotState)
    province: SlotState = Field(default_factory=SlotState)
    city: SlotState = Field(default_factory=SlotState)
    barangay: SlotState = Field(default_factory=SlotState)

    def slot(self, level: Union[LocationLevel, str]) -> SlotState:
        return getattr(self, LocationLevel.parse(level).value)

    def with_slots(self, slots: dict[LocationLevel, SlotState]) -> "SelectionState":
        """Return a copy with several slots replaced at once."""
        return self.model_copy(update={lvl.value: s for lvl, s in slots.items()})
