"""
Module: geoacct_kernel.models.fixed_asset
Responsibility: ORM persistence for fixed assets.
Architecture position: Kernel > Models.

Invariants enforced:
    - book_value is stored alongside value and accumulated_depreciation and
      is always written as ``value - accumulated_depreciation``
      (ck_fixed_asset_book_value_nonneg guards the lower bound).
    - accumulated_depreciation and book_value change only through the
      posting flows (FixedAssetService).
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from geoacct_kernel.db.base import TrackedBase
from geoacct_kernel.db.types import round_money
from geoacct_kernel.domain.dtos import FixedAssetSnapshot


class FixedAsset(TrackedBase):
    """Fixed asset register row."""

    __tablename__ = "fixed_assets"

    __table_args__ = (
        CheckConstraint("value > 0", name="ck_fixed_asset_value_positive"),
        CheckConstraint("useful_life > 0", name="ck_fixed_asset_life_positive"),
        CheckConstraint("book_value >= 0", name="ck_fixed_asset_book_value_nonneg"),
    )

    asset_name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    acquisition_date: Mapped[date] = mapped_column(Date, nullable=False)
    value: Mapped[Decimal] = mapped_column(nullable=False)
    useful_life: Mapped[int] = mapped_column(Integer, nullable=False)
    accumulated_depreciation: Mapped[Decimal] = mapped_column(
        nullable=False, default=Decimal("0"),
    )
    book_value: Mapped[Decimal] = mapped_column(nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<FixedAsset {self.asset_name} ({self.category}) book={self.book_value}>"

    def to_dto(self) -> FixedAssetSnapshot:
        return FixedAssetSnapshot(
            id=self.id,
            asset_name=self.asset_name,
            category=self.category,
            acquisition_date=self.acquisition_date,
            value=round_money(self.value),
            useful_life=self.useful_life,
            accumulated_depreciation=round_money(self.accumulated_depreciation),
            description=self.description,
            location=self.location,
        )

    def apply(self, snapshot: FixedAssetSnapshot) -> None:
        """Copy the mutable state of ``snapshot`` onto this row."""
        self.asset_name = snapshot.asset_name
        self.category = snapshot.category
        self.acquisition_date = snapshot.acquisition_date
        self.value = snapshot.value
        self.useful_life = snapshot.useful_life
        self.accumulated_depreciation = snapshot.accumulated_depreciation
        self.book_value = snapshot.book_value
        self.description = snapshot.description
        self.location = snapshot.location

    @classmethod
    def from_dto(cls, dto: FixedAssetSnapshot) -> "FixedAsset":
        row = cls(id=dto.id)
        row.apply(dto)
        return row
