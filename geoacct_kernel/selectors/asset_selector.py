"""Read access to the fixed-asset register."""

from uuid import UUID

from sqlalchemy import select

from geoacct_kernel.domain.dtos import FixedAssetSnapshot
from geoacct_kernel.exceptions import FixedAssetNotFoundError
from geoacct_kernel.models.fixed_asset import FixedAsset
from geoacct_kernel.selectors.base import BaseSelector


class AssetSelector(BaseSelector[FixedAsset]):

    def get(self, asset_id: UUID, for_update: bool = False) -> FixedAssetSnapshot:
        """
        ``for_update`` takes a row lock (SELECT ... FOR UPDATE) so concurrent
        postings against one asset serialize inside the caller's transaction.
        """
        stmt = select(FixedAsset).where(FixedAsset.id == asset_id)
        if for_update:
            # refresh any identity-map copy with the locked row's state
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        row = self.session.scalars(stmt).one_or_none()
        if row is None:
            raise FixedAssetNotFoundError(str(asset_id))
        return row.to_dto()

    def all(self) -> list[FixedAssetSnapshot]:
        rows = self.session.scalars(
            select(FixedAsset).order_by(FixedAsset.acquisition_date, FixedAsset.asset_name)
        )
        return [row.to_dto() for row in rows]
