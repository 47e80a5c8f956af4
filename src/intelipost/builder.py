import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import List, Optional

from src.intelipost.errors import MissingDimensionsError, ShipmentValidationError
from src.intelipost.notifier import DimensionNotifier
from src.intelipost.schemas import (
    CartLine,
    DimensionPolicy,
    QuoteRequestDocument,
    ShipmentRequest,
    VolumeRecord,
)
from src.logger import setup_logger


VOLUME_TYPE = 'BOX'
GRAMS = 'gr'

logger = setup_logger('intelipost.builder')


def round2(value) -> Decimal:
    try:
        return Decimal(str(value or 0)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ShipmentValidationError(f'Amount out of range: {value}', code='INVALID_AMOUNT') from e


def normalize_weight(weight: float, weight_type: Optional[str]) -> float:
    """Package weight in kilograms, two decimals."""
    if weight_type == GRAMS:
        return float(round2(Decimal(str(weight)) / 1000))

    if weight_type not in (None, '', 'kg'):
        # Unknown units are taken as kilograms
        logger.warning(f"Unknown weight type '{weight_type}', assuming kilograms")
    return float(round2(weight))


def digits_only(zip_code: str) -> str:
    return re.sub(r'[^0-9]', '', zip_code or '')


def has_dimensions(line: CartLine) -> bool:
    dimensions = line.dimensions
    if dimensions is None:
        return False

    return all(
        value is not None and value > 0
        for value in (dimensions.width, dimensions.height, dimensions.length)
    )


def build_volume(line: CartLine) -> VolumeRecord:
    volume = VolumeRecord(
        volume_type=VOLUME_TYPE,
        # Per-unit values are rounded before multiplying by quantity
        weight=float(round2(line.weight) * line.quantity),
        cost_of_goods=float(round2(line.price) * line.quantity),
    )

    if has_dimensions(line):
        volume.width = line.dimensions.width
        volume.height = line.dimensions.height
        volume.length = line.dimensions.length

    return volume


async def build(
    request: ShipmentRequest,
    policy: DimensionPolicy,
    notifier: Optional[DimensionNotifier] = None,
) -> QuoteRequestDocument:
    """
    Assemble the quote body for one attempt.

    With notify_on_missing_dimensions on, any line without dimensions aborts
    the whole quote: the notifier receives every incomplete line and
    MissingDimensionsError is raised. With it off, such lines are quoted by
    weight and cost only.
    """
    if not request.items:
        raise ShipmentValidationError('Cart is empty', code='EMPTY_CART')

    incomplete: List[CartLine] = [line for line in request.items if not has_dimensions(line)]
    if incomplete:
        logger.warning(f"{len(incomplete)} product(s) do not have dimensions set")

        if policy.notify_on_missing_dimensions:
            if notifier is not None:
                await notifier.notify(incomplete)
            raise MissingDimensionsError(incomplete)

    document = QuoteRequestDocument(
        origin_zip_code=digits_only(request.origin_zip_code),
        destination_zip_code=digits_only(request.destination_zip_code),
        volumes=[build_volume(line) for line in request.items],
        package_weight=normalize_weight(request.package_weight, policy.weight_type),
    )

    logger.info(
        f"Quote request built: {document.origin_zip_code} -> {document.destination_zip_code}, "
        f"{len(document.volumes)} volume(s), {document.package_weight} kg"
    )
    return document
