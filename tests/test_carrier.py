"""
Tests for the Intelipost rate collection pipeline.
"""
import httpx
import pytest

from src.intelipost.carrier import IntelipostCarrier
from src.intelipost.client import QuoteClient
from src.intelipost.errors import ZeroWeightError
from src.intelipost.notifier import DimensionNotifier
from src.intelipost.schemas import CartLine


BASE_URL = "https://api.intelipost.test/api/v1"


def make_carrier(config, secrets, transport, notifier=None) -> IntelipostCarrier:
    return IntelipostCarrier(
        config=config,
        secrets=secrets,
        notifier=notifier,
        api_url=BASE_URL,
        client_factory=lambda api_key: QuoteClient(BASE_URL, api_key, transport=transport),
    )


@pytest.fixture
def ok_transport(recording_transport, quote_payload):
    return recording_transport(lambda request: httpx.Response(200, json=quote_payload))


@pytest.mark.asyncio
async def test_collects_rates(config, secrets, shipment_request, ok_transport):
    transport, calls = ok_transport
    carrier = make_carrier(config, secrets, transport)

    result = await carrier.collect_rates(shipment_request)

    assert [rate.method for rate in result.rates] == ["Standard", "Express"]
    assert len(calls) == 1
    assert calls[0].headers["api_key"] == "api-key-123"


@pytest.mark.asyncio
async def test_configured_origin_used_when_request_has_none(config, secrets, shipment_request, ok_transport):
    transport, calls = ok_transport
    carrier = make_carrier(config, secrets, transport)

    await carrier.collect_rates(shipment_request)

    assert b'"origin_zip_code":"01310100"' in calls[0].content


@pytest.mark.asyncio
async def test_carrier_title_from_config(config, secrets, shipment_request, ok_transport):
    transport, _ = ok_transport
    config = config.model_copy(update={"title": "Fast Shop"})

    result = await make_carrier(config, secrets, transport).collect_rates(shipment_request)

    assert {rate.carrier_title for rate in result.rates} == {"Fast Shop"}


@pytest.mark.asyncio
async def test_invalid_zip_code_never_calls_api(config, secrets, shipment_request, ok_transport):
    transport, calls = ok_transport
    shipment_request.destination_zip_code = "not-a-zip"

    result = await make_carrier(config, secrets, transport).collect_rates(shipment_request)

    assert result is None
    assert calls == []


@pytest.mark.asyncio
async def test_empty_cart_never_calls_api(config, secrets, shipment_request, ok_transport):
    transport, calls = ok_transport
    shipment_request.items = []

    result = await make_carrier(config, secrets, transport).collect_rates(shipment_request)

    assert result is None
    assert calls == []


@pytest.mark.asyncio
async def test_disabled_carrier_returns_no_quote(config, secrets, shipment_request, ok_transport):
    transport, calls = ok_transport
    config = config.model_copy(update={"active": False})

    assert await make_carrier(config, secrets, transport).collect_rates(shipment_request) is None
    assert calls == []


@pytest.mark.asyncio
async def test_zero_weight_propagates(config, secrets, shipment_request, ok_transport):
    transport, calls = ok_transport
    shipment_request.package_weight = 0

    with pytest.raises(ZeroWeightError):
        await make_carrier(config, secrets, transport).collect_rates(shipment_request)

    assert calls == []


@pytest.mark.asyncio
async def test_missing_dimensions_notifies_and_aborts(config, secrets, shipment_request, ok_transport, mock_inbox, boxed_line):
    transport, calls = ok_transport
    config = config.model_copy(update={"notify_missing_dimensions": True})
    loose = CartLine(product_id=30, name="Loose", weight=1.0, price=5.0)
    shipment_request.items = [boxed_line, loose]
    notifier = DimensionNotifier(mock_inbox, "https://shop.example/admin")

    result = await make_carrier(config, secrets, transport, notifier).collect_rates(shipment_request)

    assert result is None
    assert calls == []
    mock_inbox.add.assert_awaited_once()
    message = mock_inbox.add.await_args.args[2]
    assert "/catalog/product/edit/id/30" in message
    assert "/catalog/product/edit/id/10" not in message


@pytest.mark.asyncio
async def test_missing_dimensions_quoted_when_notification_off(config, secrets, shipment_request, ok_transport, mock_inbox):
    transport, calls = ok_transport
    shipment_request.items = [CartLine(product_id=30, name="Loose", weight=1.0, price=5.0)]
    notifier = DimensionNotifier(mock_inbox, "https://shop.example/admin")

    result = await make_carrier(config, secrets, transport, notifier).collect_rates(shipment_request)

    assert len(result.rates) == 2
    assert len(calls) == 1
    mock_inbox.add.assert_not_awaited()


@pytest.mark.asyncio
async def test_timeout_returns_no_quote(config, secrets, shipment_request):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    carrier = make_carrier(config, secrets, httpx.MockTransport(handler))

    assert await carrier.collect_rates(shipment_request) is None


@pytest.mark.asyncio
async def test_empty_options_distinct_from_no_quote(config, secrets, shipment_request):
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"content": {"delivery_options": []}})
    )

    result = await make_carrier(config, secrets, transport).collect_rates(shipment_request)

    assert result is not None
    assert result.rates == []


def test_allowed_methods(config, secrets):
    carrier = IntelipostCarrier(config=config, secrets=secrets)

    assert carrier.get_allowed_methods() == {"intelipost": "Intelipost"}


@pytest.mark.asyncio
async def test_failed_notice_still_aborts_quote(config, secrets, shipment_request, ok_transport, mock_inbox):
    transport, calls = ok_transport
    config = config.model_copy(update={"notify_missing_dimensions": True})
    shipment_request.items = [CartLine(product_id=30, name="Loose", weight=1.0, price=5.0)]
    mock_inbox.add.side_effect = RuntimeError("inbox unavailable")
    notifier = DimensionNotifier(mock_inbox, "https://shop.example/admin")

    result = await make_carrier(config, secrets, transport, notifier).collect_rates(shipment_request)

    assert result is None
    assert calls == []
    mock_inbox.add.assert_awaited_once()


@pytest.mark.asyncio
async def test_out_of_range_amount_returns_no_quote(config, secrets, shipment_request, ok_transport):
    transport, calls = ok_transport
    shipment_request.items[0].weight = 1e30

    assert await make_carrier(config, secrets, transport).collect_rates(shipment_request) is None
    assert calls == []
