"""Asset allocation ledger.

The ledger owns the estate's assets and their current locations. Every asset
is in exactly one place at a time: the pool, an heir, or one of an heir's
extended slots. Assets are created only by ``add_asset`` and destroyed only
by ``delete_asset``; moves never change amounts.

Placement rules:
- The pool and extended slots always accept assets
- A person id accepts assets only if that person is a legal heir
- Only pool assets can be deleted, so an allocation is never lost silently

Rejected placements are routine outcomes of a drag-and-drop board and are
reported through return values, not exceptions.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional, Sequence, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ValidationError
from .models import (
    POOL,
    Asset,
    AssetType,
    ExtendedSlotLocation,
    HeirLocation,
    HeirRecord,
    OperationResult,
    PoolLocation,
    parse_location,
)
from .tax_standards import DEFAULT_ASSET_AMOUNTS

logger = structlog.get_logger()

LocationLike = Union[str, PoolLocation, HeirLocation, ExtendedSlotLocation]


def _to_whole_decimal(raw: Any, unit: int = 1) -> Decimal:
    """Convert entered text or numbers into a whole Decimal amount."""
    if isinstance(raw, bool) or raw is None:
        raise ValidationError(
            "Amount must be a number",
            field="amount",
            value=raw,
            constraint="numeric",
        )

    try:
        if isinstance(raw, str):
            value = Decimal(raw.replace(",", "").replace("_", "").strip())
        elif isinstance(raw, float):
            value = Decimal(str(raw))
        else:
            value = Decimal(raw)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(
            "Amount must be a number",
            field="amount",
            value=raw,
            constraint="numeric",
        )

    if not value.is_finite():
        raise ValidationError(
            "Amount must be a finite number",
            field="amount",
            value=str(raw),
            constraint="finite",
        )

    amount = value * unit
    if amount != amount.to_integral_value():
        raise ValidationError(
            "Amount must be a whole number of currency units",
            field="amount",
            value=str(raw),
            constraint="integer after unit conversion",
        )
    return amount


def parse_amount(raw: Any, unit: int = 1) -> int:
    """Convert user input into a positive whole amount.

    Args:
        raw: Entered amount (int, Decimal, float or numeric string; thousands
            separators are ignored)
        unit: Multiplier for the entered unit, e.g. 10_000 for amounts
            entered in ten-thousands

    Returns:
        Amount in whole currency units

    Raises:
        ValidationError: If the input is not numeric, not whole after unit
            conversion, or not positive.
    """
    amount = _to_whole_decimal(raw, unit)
    if amount <= 0:
        raise ValidationError(
            "Amount must be greater than zero",
            field="amount",
            value=str(raw),
            constraint="> 0",
        )
    return int(amount)


def parse_edit_amount(raw: Any) -> int:
    """Convert an edited amount, clamping negatives to zero.

    Raises:
        ValidationError: If the input is not numeric or not whole.
    """
    return max(0, int(_to_whole_decimal(raw)))


_LOCATION_TYPES = (PoolLocation, HeirLocation, ExtendedSlotLocation)


def _coerce_location(target: LocationLike):
    """Return the tagged location for ``target``.

    Raises:
        TypeError: If ``target`` is neither a key string nor a location.
        pydantic.ValidationError: If a key string is malformed.
    """
    if isinstance(target, str):
        return parse_location(target)
    if isinstance(target, _LOCATION_TYPES):
        return target
    raise TypeError(f"Not an allocation target: {target!r}")


def _pool_order(asset: Asset) -> tuple[int, int]:
    return (asset.asset_type.rank, -asset.amount)


class AllocationLedger:
    """Assets of an estate and where each one is currently allocated."""

    def __init__(self, assets: Optional[Iterable[Asset]] = None):
        self._assets: list[Asset] = [a.model_copy() for a in (assets or [])]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def assets(self) -> list[Asset]:
        return list(self._assets)

    def __len__(self) -> int:
        return len(self._assets)

    def get(self, asset_id: str) -> Optional[Asset]:
        for asset in self._assets:
            if asset.id == asset_id:
                return asset
        return None

    def assets_at(self, location: LocationLike) -> list[Asset]:
        location = _coerce_location(location)
        return [a for a in self._assets if a.location == location]

    def pool_assets(self) -> list[Asset]:
        return [a for a in self._assets if a.in_pool]

    def total_amount(self) -> int:
        return sum(a.amount for a in self._assets)

    def allocation_started(self) -> bool:
        return any(not a.in_pool for a in self._assets)

    def snapshot(self) -> tuple:
        """Structural fingerprint of the ledger, for caching derived values."""
        return tuple(
            (a.id, a.asset_type.value, a.amount, a.location_key, a.name)
            for a in self._assets
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _sort_pool(self) -> None:
        """Order pool assets by type, then largest first; others keep their place."""
        pool = iter(sorted(self.pool_assets(), key=_pool_order))
        self._assets = [next(pool) if a.in_pool else a for a in self._assets]

    def add_asset(
        self,
        asset_type: Union[AssetType, str],
        amount: Any,
        name: Optional[str] = None,
        unit: int = 1,
    ) -> OperationResult:
        """
        Add an asset to the pool.

        Args:
            asset_type: Kind of asset
            amount: Entered amount, validated by ``parse_amount``
            name: Optional display name
            unit: Multiplier for the entered unit

        Returns:
            Accepted result with the new asset id, or a rejected result with
            the reason. A rejected add leaves the ledger unchanged.
        """
        try:
            asset_type = AssetType(asset_type)
        except ValueError:
            logger.info("asset_add_rejected", asset_type=str(asset_type), reason="unknown type")
            return OperationResult(accepted=False, reason=f"Unknown asset type: {asset_type}")

        try:
            value = parse_amount(amount, unit=unit)
        except ValidationError as e:
            logger.info("asset_add_rejected", asset_type=asset_type.value, reason=e.message)
            return OperationResult(accepted=False, reason=e.message)

        asset = Asset(asset_type=asset_type, amount=value, name=name or None)
        self._assets.append(asset)
        self._sort_pool()

        logger.info("asset_added", asset_id=asset.id, asset_type=asset_type.value, amount=value)
        return OperationResult(accepted=True, asset_id=asset.id)

    def add_default_asset(self, asset_type: Union[AssetType, str]) -> OperationResult:
        """Add an asset with the default amount for its type."""
        try:
            asset_type = AssetType(asset_type)
        except ValueError:
            return OperationResult(accepted=False, reason=f"Unknown asset type: {asset_type}")
        return self.add_asset(asset_type, DEFAULT_ASSET_AMOUNTS[asset_type])

    def move_asset(
        self,
        asset_id: str,
        target: LocationLike,
        heirs: Sequence[HeirRecord],
    ) -> bool:
        """
        Move an asset to a new location.

        Args:
            asset_id: Asset to move
            target: Destination, as a location or its key string
            heirs: Current heir records, used to check person targets

        Returns:
            True if the asset was moved. Unknown assets, non-heirs and
            unknown person ids are rejected without any change.
        """
        asset = self.get(asset_id)
        if asset is None:
            logger.info("asset_move_rejected", asset_id=asset_id, reason="unknown asset")
            return False

        try:
            location = _coerce_location(target)
        except (PydanticValidationError, TypeError):
            logger.info("asset_move_rejected", asset_id=asset_id, reason="malformed target")
            return False

        if isinstance(location, HeirLocation):
            heir = next((h for h in heirs if h.id == location.heir_id), None)
            if heir is None or not heir.is_heir:
                logger.info(
                    "asset_move_rejected",
                    asset_id=asset_id,
                    target=location.key,
                    reason="not a legal heir",
                )
                return False

        source, destination = asset.location_key, location.key
        asset.location = location
        logger.info("asset_moved", asset_id=asset_id, source=source, target=destination)
        return True

    def return_to_pool(self, asset_id: str) -> bool:
        """Withdraw an allocated asset back to the pool."""
        return self.move_asset(asset_id, POOL, heirs=())

    def delete_asset(self, asset_id: str) -> bool:
        """Delete an asset; only pool assets can be deleted."""
        asset = self.get(asset_id)
        if asset is None:
            return False
        if not asset.in_pool:
            logger.info(
                "asset_delete_rejected",
                asset_id=asset_id,
                location=asset.location_key,
                reason="asset is allocated",
            )
            return False
        self._assets.remove(asset)
        logger.info("asset_deleted", asset_id=asset_id)
        return True

    def set_amount(self, asset_id: str, new_amount: Any) -> bool:
        """Edit an asset's amount in place, clamping negatives to zero.

        Unknown assets and non-numeric or fractional amounts are rejected
        without any change.
        """
        asset = self.get(asset_id)
        if asset is None:
            return False
        try:
            amount = parse_edit_amount(new_amount)
        except ValidationError as e:
            logger.info("asset_amount_rejected", asset_id=asset_id, reason=e.message)
            return False
        asset.amount = amount
        logger.info("asset_amount_set", asset_id=asset_id, amount=asset.amount)
        return True

    def reset_allocation(self) -> None:
        """Put every asset back in the pool."""
        for asset in self._assets:
            asset.location = POOL
        self._sort_pool()
        logger.info("allocation_reset", asset_count=len(self._assets))

    def release_holder(self, heir_id: str, include_extended: bool = True) -> int:
        """Return assets held by a person to the pool.

        Args:
            heir_id: Person whose allocations are withdrawn
            include_extended: Also withdraw assets on that person's spouse and
                children slots

        Returns:
            Number of assets returned to the pool
        """
        holders = (HeirLocation, ExtendedSlotLocation) if include_extended else (HeirLocation,)
        released = 0
        for asset in self._assets:
            location = asset.location
            if isinstance(location, holders) and location.heir_id == heir_id:
                asset.location = POOL
                released += 1
        if released:
            self._sort_pool()
            logger.info("holder_released", heir_id=heir_id, asset_count=released)
        return released
