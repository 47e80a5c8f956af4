from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Upper bound for cart weights and money amounts
MAX_AMOUNT = 1e9


class Dimensions(BaseModel):
    width: Optional[float] = Field(None, allow_inf_nan=False)
    height: Optional[float] = Field(None, allow_inf_nan=False)
    length: Optional[float] = Field(None, allow_inf_nan=False)

class CartLine(BaseModel):
    product_id: int
    name: str = ''
    quantity: int = Field(1, ge=1)
    weight: float = Field(0.0, ge=0, lt=MAX_AMOUNT, allow_inf_nan=False)
    price: float = Field(0.0, ge=0, lt=MAX_AMOUNT, allow_inf_nan=False)
    dimensions: Optional[Dimensions] = None

class ShipmentRequest(BaseModel):
    origin_zip_code: Optional[str] = None
    destination_zip_code: str
    package_weight: float = Field(lt=MAX_AMOUNT, allow_inf_nan=False)
    package_value: float = Field(0.0, lt=MAX_AMOUNT, allow_inf_nan=False)
    items: List[CartLine] = []


class IntelipostConfig(BaseModel):
    """Carrier settings as stored by the storefront, credentials still encrypted."""
    model_config = ConfigDict(frozen=True)

    active: bool = False
    origin_zip_code: str = ''
    weight_type: str = 'kg'
    account: Optional[str] = None
    password: Optional[str] = None
    api_key: Optional[str] = None
    token: Optional[str] = None
    name: str = 'Intelipost'
    title: str = 'E-Sprinter'
    notify_missing_dimensions: bool = False

class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    account: str
    password: str = Field(repr=False)
    api_key: str = Field(repr=False)
    token: str = Field(repr=False)

class DimensionPolicy(BaseModel):
    notify_on_missing_dimensions: bool = False
    weight_type: str = 'kg'


class VolumeRecord(BaseModel):
    volume_type: str = 'BOX'
    width: Optional[float] = Field(None, allow_inf_nan=False)
    height: Optional[float] = Field(None, allow_inf_nan=False)
    length: Optional[float] = Field(None, allow_inf_nan=False)
    weight: float = Field(ge=0)
    cost_of_goods: float = Field(ge=0)

class QuoteRequestDocument(BaseModel):
    origin_zip_code: str
    destination_zip_code: str
    volumes: List[VolumeRecord] = Field(min_length=1)
    # Normalized to kilograms; not part of the quote body
    package_weight: float = Field(0.0, exclude=True)


class DeliveryOption(BaseModel):
    description: str
    final_shipping_cost: float
    provider_shipping_cost: float
    # Intelipost's wire name for the delivery deadline, in business days
    delivery_estimate_business_days: Optional[int] = None

class QuoteContent(BaseModel):
    delivery_options: List[DeliveryOption] = []

class QuoteResponse(BaseModel):
    content: QuoteContent


class CarrierRateOption(BaseModel):
    carrier: str
    carrier_title: str
    method: str
    method_title: str
    price: float
    cost: float
    deadline_days: Optional[int] = None
    deadline_label: Optional[str] = None

class RateQuoteResult(BaseModel):
    rates: List[CarrierRateOption] = []

class CollectRatesResponse(BaseModel):
    carrier: str
    available: bool
    rates: List[CarrierRateOption] = []
