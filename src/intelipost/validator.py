import re
from dataclasses import dataclass
from typing import Optional

from src.encryption import SecretResolver
from src.intelipost.errors import (
    ConfigurationError,
    QuoteError,
    ShipmentValidationError,
    ZeroWeightError,
)
from src.intelipost.schemas import Credentials, IntelipostConfig, ShipmentRequest
from src.logger import setup_logger


# Brazilian CEP, e.g. 01310-100 or 01.310-100; searched, not anchored
ZIP_CODE_REGEX = re.compile(r'[0-9]{2}\.?[0-9]{3}-?[0-9]{3}')

logger = setup_logger('intelipost.validator')


@dataclass(frozen=True)
class ValidationOutcome:
    credentials: Optional[Credentials] = None
    rejection: Optional[QuoteError] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None


def is_valid_zip_code(zip_code: Optional[str]) -> bool:
    return bool(zip_code) and ZIP_CODE_REGEX.search(zip_code) is not None


def resolve_origin_zip_code(config: IntelipostConfig, request: ShipmentRequest) -> str:
    return request.origin_zip_code or config.origin_zip_code


def validate(
    config: IntelipostConfig,
    request: ShipmentRequest,
    secrets: SecretResolver,
) -> ValidationOutcome:
    """
    Decide whether the carrier can quote this shipment.

    Declines are returned as an outcome carrying the rejection; only a
    non-positive package weight is raised, since it points at broken catalog
    data rather than a shipment the carrier cannot serve.
    """
    if not config.active:
        logger.warning("Intelipost is inactive")
        return ValidationOutcome(
            rejection=ConfigurationError('Carrier is disabled', code='CARRIER_DISABLED')
        )

    origin = resolve_origin_zip_code(config, request)
    destination = request.destination_zip_code

    origin_ok = is_valid_zip_code(origin)
    destination_ok = is_valid_zip_code(destination)
    if not origin_ok or not destination_ok:
        if not origin_ok and not destination_ok:
            side = 'both'
        elif not origin_ok:
            side = 'origin'
        else:
            side = 'destination'
        logger.warning(f"Invalid zip code {origin} or {destination} ({side})")
        return ValidationOutcome(
            rejection=ShipmentValidationError(
                f'Invalid {side} zip code',
                code='INVALID_POSTAL_CODE',
                side=side,
            )
        )

    if request.package_weight <= 0:
        logger.error(f"Package weight is {request.package_weight}, catalog data is incomplete")
        raise ZeroWeightError('Weight zero')

    account = secrets.decrypt(config.account)
    password = secrets.decrypt(config.password)
    api_key = secrets.decrypt(config.api_key)
    token = secrets.decrypt(config.token)

    if not all(isinstance(value, str) and value for value in (account, password, api_key, token)):
        logger.warning("Intelipost not configured")
        logger.warning(f"account set: {bool(account)}")
        logger.warning(f"password length: {len(password or '')}")
        return ValidationOutcome(
            rejection=ConfigurationError('Intelipost credentials are missing')
        )

    if not request.items:
        logger.warning("Cart is empty")
        return ValidationOutcome(
            rejection=ShipmentValidationError('Cart is empty', code='EMPTY_CART')
        )

    return ValidationOutcome(
        credentials=Credentials(
            account=account,
            password=password,
            api_key=api_key,
            token=token,
        )
    )
