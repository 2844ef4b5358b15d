"""Tests for the GLS adapter."""

from datetime import datetime

import pytest

from carrier_api import GlsAPI, strip_html
from parcel_model import (
    UNKNOWN_LOCATION,
    ParcelNonExistentException,
    ParcelProperty,
    Status,
)

GLS_DELIVERED_RESPONSE = {
    "history": [
        {
            "date": "2024-01-05",
            "time": "14:30:00",
            "evtDscr": "The parcel has been <b>delivered</b>.",
            "address": {"city": "Berlin", "countryName": "Germany", "countryCode": "DE"},
        },
        {
            "date": "2024-01-05",
            "time": "08:02:11",
            "evtDscr": "The parcel is expected to be delivered during the day.",
            "address": {"city": "", "countryName": "Germany", "countryCode": "DE"},
        },
        {
            "date": "2024-01-04",
            "time": "19:45:00",
            "evtDscr": "The parcel has left the <i>parcel center</i>.",
        },
    ],
    "progressBar": {"statusInfo": "DELIVERED"},
    "infos": [
        {"type": "WEIGHT", "name": "Weight", "value": "2.5 kg"},
        {"type": "PRODUCT", "name": "Product", "value": "Parcel"},
    ],
    "references": [],
    "arrivalTime": {"name": "Delivered", "value": "05.01.2024 14:30"},
}


@pytest.fixture
def gls(session, settings):
    return GlsAPI(session, settings.gls_locale, timeout=settings.http_timeout)


def test_strip_html():
    assert strip_html('<p>Out for   <b>delivery</b></p>') == 'Out for delivery'
    assert strip_html('') == ''
    assert strip_html(None) == ''


@pytest.mark.parametrize('status_info, expected', [
    ('PREADVICE', Status.PREADVICE),
    ('INTRANSIT', Status.IN_TRANSIT),
    ('INWAREHOUSE', Status.IN_WAREHOUSE),
    ('INDELIVERY', Status.OUT_FOR_DELIVERY),
    ('DELIVERED', Status.DELIVERED),
])
def test_status_mapping(gls, status_info, expected):
    assert gls.map_status(status_info) == expected


def test_unknown_status_degrades_and_logs(gls, caplog):
    assert gls.map_status('NOTDELIVERED') == Status.UNKNOWN
    assert 'NOTDELIVERED' in caplog.text


def test_requires_post_code(gls):
    assert gls.accepts_post_code
    assert gls.requires_post_code


@pytest.mark.asyncio
async def test_requests_extended_parcel_info(gls, session, make_response):
    session.request.return_value = make_response(GLS_DELIVERED_RESPONSE)

    await gls.get_parcel('12345678901', '10115')

    session.request.assert_called_once_with(
        'GET',
        'https://gls-group.com/app/service/open/rest/GROUP/en/rstt028/12345678901',
        params={'postalCode': '10115'},
        timeout=5.0,
    )


@pytest.mark.asyncio
async def test_delivered_parcel(gls, session, make_response):
    session.request.return_value = make_response(GLS_DELIVERED_RESPONSE)

    parcel = await gls.get_parcel('12345678901', '10115')

    assert parcel.id == '12345678901'
    assert parcel.status == Status.DELIVERED
    assert len(parcel.history) == 3
    assert parcel.properties == {
        ParcelProperty.WEIGHT: '2.5 kg',
        ParcelProperty.DELIVERY_TIME: '05.01.2024 14:30',
    }


@pytest.mark.asyncio
async def test_history_normalization(gls, session, make_response):
    session.request.return_value = make_response(GLS_DELIVERED_RESPONSE)

    history = (await gls.get_parcel('12345678901', '10115')).history

    assert history[0].description == 'The parcel has been delivered.'
    assert history[0].timestamp == datetime(2024, 1, 5, 14, 30)
    assert history[0].location == 'Berlin, Germany'

    # Empty city, the country is all GLS knows
    assert history[1].location == 'Germany'
    assert history[1].timestamp == datetime(2024, 1, 5, 8, 2, 11)

    assert history[2].description == 'The parcel has left the parcel center.'
    assert history[2].location == UNKNOWN_LOCATION


@pytest.mark.asyncio
async def test_in_transit_reports_eta(gls, session, make_response):
    payload = {
        "history": [],
        "progressBar": {"statusInfo": "INTRANSIT"},
        "infos": [{"type": "WEIGHT", "value": "2.5kg"}],
        "arrivalTime": {"value": "2024-01-06T10:00"},
    }
    session.request.return_value = make_response(payload)

    parcel = await gls.get_parcel('12345678901', '10115')

    assert parcel.status == Status.IN_TRANSIT
    assert parcel.properties[ParcelProperty.WEIGHT] == '2.5kg'
    assert parcel.properties[ParcelProperty.ETA] == '2024-01-06T10:00'
    assert ParcelProperty.DELIVERY_TIME not in parcel.properties


@pytest.mark.asyncio
async def test_missing_post_code_is_not_found(gls, session):
    with pytest.raises(ParcelNonExistentException) as excinfo:
        await gls.get_parcel('12345678901')

    assert excinfo.value.reason == 'postal code required'
    session.request.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_parcel_is_not_found(gls, session, make_response):
    session.request.return_value = make_response({"exceptionText": "No data found"}, 404)

    with pytest.raises(ParcelNonExistentException):
        await gls.get_parcel('12345678901', '10115')


@pytest.mark.asyncio
async def test_missing_progress_bar_is_not_found(gls, session, make_response):
    session.request.return_value = make_response({"history": []})

    with pytest.raises(ParcelNonExistentException) as excinfo:
        await gls.get_parcel('12345678901', '10115')

    assert excinfo.value.reason == 'malformed response'
