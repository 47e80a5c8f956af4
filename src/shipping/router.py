from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select

from src.config import settings
from src.database import SessionDep
from src.encryption import FernetSecretResolver
from src.intelipost.carrier import IntelipostCarrier
from src.intelipost.errors import DataIntegrityError
from src.intelipost.mapper import CARRIER_CODE
from src.intelipost.notifier import DatabaseNotificationInbox, DimensionNotifier
from src.intelipost.schemas import CollectRatesResponse, ShipmentRequest
from src.logger import setup_logger
from src.models import CarrierSettingsModel


logger = setup_logger('shipping')
shipping_router = APIRouter(tags=['shipping'])

async def get_intelipost_carrier(session: SessionDep) -> Optional[IntelipostCarrier]:
    result = await session.execute(
        select(CarrierSettingsModel).where(CarrierSettingsModel.service_name == CARRIER_CODE)
    )
    carrier_settings = result.scalars().first()

    if not carrier_settings:
        logger.warning("No carrier settings stored for Intelipost")
        return None

    return IntelipostCarrier(
        config=carrier_settings.to_config(),
        secrets=FernetSecretResolver(),
        notifier=DimensionNotifier(DatabaseNotificationInbox(session), settings.ADMIN_BASE_URL),
        api_url=settings.INTELIPOST_API_URL,
        timeout=settings.INTELIPOST_TIMEOUT,
    )

@shipping_router.post('/api/v1/public/shipping/intelipost/rates', response_model=CollectRatesResponse)
async def collect_rates(
    request: ShipmentRequest,
    carrier: Optional[IntelipostCarrier] = Depends(get_intelipost_carrier),
):
    logger.info(f"Rate request to {request.destination_zip_code} with {len(request.items)} item(s)")

    if carrier is None:
        return CollectRatesResponse(carrier=CARRIER_CODE, available=False)

    try:
        result = await carrier.collect_rates(request)
    except DataIntegrityError as e:
        logger.error(f"Catalog data error [{e.code}]: {e.message}")
        raise HTTPException(
            status_code=422,
            detail={'code': e.code, 'message': e.message}
        )

    if result is None:
        return CollectRatesResponse(carrier=CARRIER_CODE, available=False)

    return CollectRatesResponse(carrier=CARRIER_CODE, available=True, rates=result.rates)

@shipping_router.get('/api/v1/public/shipping/intelipost/methods')
async def get_allowed_methods(
    carrier: Optional[IntelipostCarrier] = Depends(get_intelipost_carrier),
):
    if carrier is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Intelipost is not configured')

    return carrier.get_allowed_methods()
