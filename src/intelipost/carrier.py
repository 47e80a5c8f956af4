from typing import Callable, Dict, Optional

from src.encryption import SecretResolver
from src.intelipost import builder, validator
from src.intelipost.client import DEFAULT_TIMEOUT, QuoteClient
from src.intelipost.errors import (
    MissingDimensionsError,
    ShipmentValidationError,
    TransportError,
)
from src.intelipost.mapper import CARRIER_CODE, map_rates
from src.intelipost.notifier import DimensionNotifier
from src.intelipost.schemas import (
    DimensionPolicy,
    IntelipostConfig,
    RateQuoteResult,
    ShipmentRequest,
)
from src.logger import setup_logger


INTELIPOST_API_URL = 'https://api.intelipost.com.br/api/v1'

logger = setup_logger('intelipost')

ClientFactory = Callable[[str], QuoteClient]


class IntelipostCarrier:
    """
    Intelipost rate collection for checkout.

    collect_rates returns None when the carrier declines to quote (disabled,
    not configured, bad zip code, empty cart, missing dimensions) or when the
    API call fails. An empty RateQuoteResult means Intelipost answered with
    no delivery options. A non-positive package weight raises ZeroWeightError.
    """

    code = CARRIER_CODE

    def __init__(
        self,
        config: IntelipostConfig,
        secrets: SecretResolver,
        notifier: Optional[DimensionNotifier] = None,
        api_url: str = INTELIPOST_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client_factory: Optional[ClientFactory] = None,
    ):
        self.config = config
        self.secrets = secrets
        self.notifier = notifier
        self.api_url = api_url
        self.timeout = timeout
        self.client_factory = client_factory or self._default_client

    def _default_client(self, api_key: str) -> QuoteClient:
        return QuoteClient(self.api_url, api_key, timeout=self.timeout)

    def get_allowed_methods(self) -> Dict[str, str]:
        return {self.code: self.config.name}

    async def collect_rates(self, request: ShipmentRequest) -> Optional[RateQuoteResult]:
        outcome = validator.validate(self.config, request, self.secrets)
        if not outcome.accepted:
            logger.warning(f"Quote rejected [{outcome.rejection.code}]: {outcome.rejection.message}")
            return None

        request = request.model_copy(
            update={'origin_zip_code': validator.resolve_origin_zip_code(self.config, request)}
        )
        policy = DimensionPolicy(
            notify_on_missing_dimensions=self.config.notify_missing_dimensions,
            weight_type=self.config.weight_type,
        )

        try:
            document = await builder.build(request, policy, self.notifier)
        except (MissingDimensionsError, ShipmentValidationError) as e:
            logger.warning(f"Quote aborted [{e.code}]: {e.message}")
            return None

        client = self.client_factory(outcome.credentials.api_key)
        try:
            response = await client.quote(document)
        except TransportError as e:
            logger.error(f"Intelipost transport failure [{e.kind.value}]: {e.message}")
            return None

        result = map_rates(response, carrier_code=self.code, carrier_title=self.config.title)
        logger.info(f"Intelipost quote mapped to {len(result.rates)} rate(s)")
        return result
