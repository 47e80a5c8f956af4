from typing import Optional

from src.intelipost.schemas import CarrierRateOption, QuoteResponse, RateQuoteResult


CARRIER_CODE = 'intelipost'
CARRIER_TITLE = 'E-Sprinter'

# Intelipost reports "deliver on acknowledgment" as 101 days
ON_ACKNOWLEDGMENT_DAYS = 101


def format_deadline(days: Optional[int]) -> Optional[str]:
    if days is None:
        return None
    if days == 0:
        return '(same day)'
    if days == 1:
        return '(1 day)'
    if days == ON_ACKNOWLEDGMENT_DAYS:
        return '(On acknowledgment)'
    return f'({days} days)'


def map_rates(
    response: QuoteResponse,
    carrier_code: str = CARRIER_CODE,
    carrier_title: str = CARRIER_TITLE,
) -> RateQuoteResult:
    rates = []
    for option in response.content.delivery_options:
        rates.append(
            CarrierRateOption(
                carrier=carrier_code,
                carrier_title=carrier_title,
                method=option.description,
                method_title=option.description,
                price=option.final_shipping_cost,
                cost=option.provider_shipping_cost,
                deadline_days=option.delivery_estimate_business_days,
                deadline_label=format_deadline(option.delivery_estimate_business_days),
            )
        )

    return RateQuoteResult(rates=rates)
