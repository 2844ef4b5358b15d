#!/usr/bin/env python3
"""
Tracker Configuration Module

Reads carrier credentials and transport settings from environment
variables once at startup. Adapters receive the resulting settings object
and never read the environment themselves.
"""

import os
import logging
from dataclasses import dataclass

# Set up logging
logger = logging.getLogger(__name__)

DEFAULT_GLS_LOCALE = 'en'
DEFAULT_HTTP_TIMEOUT = 20.0


@dataclass(frozen=True)
class TrackerSettings:
    """Immutable carrier configuration shared by all adapters."""

    dhl_api_key: str = ''
    ups_client_id: str = ''
    ups_client_secret: str = ''
    gls_locale: str = DEFAULT_GLS_LOCALE
    http_timeout: float = DEFAULT_HTTP_TIMEOUT


def mask_secret(value):
    """
    Mask a credential for logging.

    Args:
        value (str): Secret to mask

    Returns:
        str: First and last four characters with the rest starred out
    """
    if not value:
        return ''
    if len(value) <= 8:
        return '****'
    return value[:4] + '*' * (len(value) - 8) + value[-4:]


def load_settings(environ=None):
    """
    Build tracker settings from environment variables.

    Args:
        environ (dict, optional): Mapping to read from, defaults to os.environ

    Returns:
        TrackerSettings: The loaded settings
    """
    if environ is None:
        environ = os.environ

    dhl_api_key = environ.get('DHL_API_KEY', '')
    if dhl_api_key:
        logger.info(f"DHL API configured with API Key: {mask_secret(dhl_api_key)}")
    else:
        logger.warning("DHL_API_KEY not set, DHL lookups will be rejected by DHL")

    ups_client_id = environ.get('UPS_CLIENT_ID', '')
    ups_client_secret = environ.get('UPS_CLIENT_SECRET', '')
    if ups_client_id and ups_client_secret:
        logger.info(f"Using UPS Client ID: {mask_secret(ups_client_id)}")
    else:
        logger.warning("UPS_CLIENT_ID or UPS_CLIENT_SECRET not set, UPS tracking will be unavailable")

    gls_locale = environ.get('GLS_LOCALE', '').strip().lower() or DEFAULT_GLS_LOCALE

    raw_timeout = environ.get('TRACKER_HTTP_TIMEOUT', '')
    try:
        http_timeout = float(raw_timeout) if raw_timeout else DEFAULT_HTTP_TIMEOUT
    except ValueError:
        logger.warning(f"Invalid TRACKER_HTTP_TIMEOUT {raw_timeout!r}, using {DEFAULT_HTTP_TIMEOUT}")
        http_timeout = DEFAULT_HTTP_TIMEOUT

    return TrackerSettings(
        dhl_api_key=dhl_api_key,
        ups_client_id=ups_client_id,
        ups_client_secret=ups_client_secret,
        gls_locale=gls_locale,
        http_timeout=http_timeout,
    )
