"""SQLAlchemy models for the PSGC reference tables.

Column names follow the bundled JSON datasets so rows round-trip between
the two sources unchanged. The surrogate ``id`` preserves dataset order.
"""

from __future__ import annotations

from typing import Any
from typing import Optional

from sqlalchemy import Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class ReferenceBase(DeclarativeBase):
    pass


class RegionRow(ReferenceBase):
    """Administrative region."""

    __tablename__ = "regions"

    id: Mapped[int] = mapped_column(Integer(), primary_key=True, autoincrement=True)
    region_code: Mapped[str] = mapped_column(Text(), nullable=False, unique=True)
    region_name: Mapped[str] = mapped_column(Text(), nullable=False)
    psgc_code: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)

    def to_row(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "region_code": self.region_code,
            "region_name": self.region_name,
            "psgc_code": self.psgc_code,
        }


class ProvinceRow(ReferenceBase):
    """Province, linked to its region by region_code."""

    __tablename__ = "provinces"

    id: Mapped[int] = mapped_column(Integer(), primary_key=True, autoincrement=True)
    province_code: Mapped[str] = mapped_column(Text(), nullable=False, unique=True)
    province_name: Mapped[str] = mapped_column(Text(), nullable=False)
    region_code: Mapped[str] = mapped_column(Text(), nullable=False, index=True)
    psgc_code: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)

    def to_row(self) -> dict[str, Any]:
        return {
            "province_code": self.province_code,
            "province_name": self.province_name,
            "region_code": self.region_code,
            "psgc_code": self.psgc_code,
        }


class CityRow(ReferenceBase):
    """City or municipality, linked to its province by province_code."""

    __tablename__ = "cities"

    id: Mapped[int] = mapped_column(Integer(), primary_key=True, autoincrement=True)
    city_code: Mapped[str] = mapped_column(Text(), nullable=False, unique=True)
    city_name: Mapped[str] = mapped_column(Text(), nullable=False)
    province_code: Mapped[str] = mapped_column(Text(), nullable=False, index=True)
    region_desc: Mapped[Optional[str]] = mapped_column(
        Text(),
        nullable=True,
        comment="Region code of the owning region",
    )
    psgc_code: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)

    def to_row(self) -> dict[str, Any]:
        return {
            "city_code": self.city_code,
            "city_name": self.city_name,
            "province_code": self.province_code,
            "region_desc": self.region_desc,
            "psgc_code": self.psgc_code,
            "postal_code": self.postal_code,
        }


class BarangayRow(ReferenceBase):
    """Barangay, linked to its city by city_code."""

    __tablename__ = "barangays"

    id: Mapped[int] = mapped_column(Integer(), primary_key=True, autoincrement=True)
    brgy_code: Mapped[str] = mapped_column(Text(), nullable=False, unique=True)
    brgy_name: Mapped[str] = mapped_column(Text(), nullable=False)
    city_code: Mapped[str] = mapped_column(Text(), nullable=False, index=True)
    province_code: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)
    region_code: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)

    def to_row(self) -> dict[str, Any]:
        return {
            "brgy_code": self.brgy_code,
            "brgy_name": self.brgy_name,
            "city_code": self.city_code,
            "province_code": self.province_code,
            "region_code": self.region_code,
        }
