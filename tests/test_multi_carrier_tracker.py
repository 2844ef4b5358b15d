import pytest
import requests

from multi_carrier_tracker import EXIT_FAILURE, EXIT_NOT_FOUND, EXIT_OK, main

GLS_RESPONSE = {
    "history": [
        {"date": "2024-01-05", "time": "14:30:00", "evtDscr": "Delivered",
         "address": {"city": "Berlin", "countryName": "Germany"}},
    ],
    "progressBar": {"statusInfo": "DELIVERED"},
    "infos": [{"type": "WEIGHT", "value": "2.5 kg"}],
}


def test_detect(registry, capsys):
    exit_code = main(['detect', '1Z999AA10123456784', '12345678901', 'not-a-parcel'], registry=registry)

    out = capsys.readouterr().out.splitlines()
    assert exit_code == EXIT_OK
    assert out == [
        '1Z999AA10123456784: UPS',
        '12345678901: DHL, GLS',
        'NOTAPARCEL: UNKNOWN',
    ]


def test_track_prints_parcel(registry, session, make_response, capsys):
    session.request.return_value = make_response(GLS_RESPONSE)

    exit_code = main(['track', '12345678901', '--carrier', 'gls', '--postal-code', '10115'], registry=registry)

    out = capsys.readouterr().out.splitlines()
    assert exit_code == EXIT_OK
    assert out == [
        'Parcel 12345678901 (GLS)',
        'Status: Delivered',
        'Weight: 2.5 kg',
        'History:',
        '  2024-01-05 14:30  Delivered (Berlin, Germany)',
    ]


def test_track_detects_carrier(registry, session, make_response, capsys):
    session.request.return_value = make_response({"shipments": [{
        "id": "12345678901",
        "status": {"statusCode": "pre-transit", "status": "SHIPMENT INFORMATION RECEIVED"},
        "events": [],
    }]})

    exit_code = main(['track', '12345678901'], registry=registry)

    out = capsys.readouterr().out
    assert exit_code == EXIT_OK
    assert 'Assuming DHL (also possible: GLS)' in out
    assert 'Status: Preadvice' in out
    assert 'No tracking events yet' in out


def test_track_unknown_format(registry, session, capsys):
    exit_code = main(['track', 'not-a-parcel'], registry=registry)

    assert exit_code == EXIT_FAILURE
    assert 'pass --carrier' in capsys.readouterr().out
    session.request.assert_not_called()


def test_track_not_found(registry, session, make_response, capsys):
    session.request.return_value = make_response({"title": "No shipment found"}, 404)

    exit_code = main(['track', '12345678901', '--carrier', 'dhl'], registry=registry)

    assert exit_code == EXIT_NOT_FOUND
    assert 'DHL has no parcel 12345678901' in capsys.readouterr().out


def test_track_network_failure(registry, session, capsys):
    session.request.side_effect = requests.ConnectionError('connection refused')

    exit_code = main(['track', '520000011395200025754311'], registry=registry)

    assert exit_code == EXIT_FAILURE
    assert 'Could not reach InPost' in capsys.readouterr().out


def test_unknown_carrier_choice_is_rejected(registry):
    with pytest.raises(SystemExit):
        main(['track', '12345678901', '--carrier', 'undefined'], registry=registry)
