from tracker_config import (
    DEFAULT_GLS_LOCALE,
    DEFAULT_HTTP_TIMEOUT,
    TrackerSettings,
    load_settings,
    mask_secret,
)


def test_load_settings_from_environment():
    settings = load_settings({
        'DHL_API_KEY': 'dhl-secret-key',
        'UPS_CLIENT_ID': 'ups-client',
        'UPS_CLIENT_SECRET': 'ups-secret',
        'GLS_LOCALE': ' DE ',
        'TRACKER_HTTP_TIMEOUT': '7.5',
    })

    assert settings == TrackerSettings(
        dhl_api_key='dhl-secret-key',
        ups_client_id='ups-client',
        ups_client_secret='ups-secret',
        gls_locale='de',
        http_timeout=7.5,
    )


def test_defaults_warn_about_missing_credentials(caplog):
    settings = load_settings({})

    assert settings.dhl_api_key == ''
    assert settings.gls_locale == DEFAULT_GLS_LOCALE
    assert settings.http_timeout == DEFAULT_HTTP_TIMEOUT
    assert 'DHL_API_KEY not set' in caplog.text
    assert 'UPS_CLIENT_ID or UPS_CLIENT_SECRET not set' in caplog.text


def test_invalid_timeout_falls_back(caplog):
    settings = load_settings({'TRACKER_HTTP_TIMEOUT': 'soon'})

    assert settings.http_timeout == DEFAULT_HTTP_TIMEOUT
    assert 'TRACKER_HTTP_TIMEOUT' in caplog.text


def test_secrets_are_never_logged(caplog):
    caplog.set_level('INFO')

    load_settings({'DHL_API_KEY': 'abcd1234efgh5678'})

    assert 'abcd1234efgh5678' not in caplog.text
    assert 'abcd********5678' in caplog.text


def test_mask_secret():
    assert mask_secret('') == ''
    assert mask_secret('short') == '****'
    assert mask_secret('abcdefghij') == 'abcd**ghij'
