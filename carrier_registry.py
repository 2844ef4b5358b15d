#!/usr/bin/env python3
"""
Carrier Registry Module

Maps every supported carrier to exactly one adapter, routes parcel lookups
to the right adapter and suggests carriers for a tracking number based on
its format.
"""

import logging
from enum import Enum
from http.cookiejar import DefaultCookiePolicy

import requests

from carrier_api import DhlAPI, GlsAPI, InPostAPI, UpsAPI
from carrier_detector import normalize_tracking_number
from parcel_model import CarrierConfigurationError
from tracker_config import load_settings

# Set up logging
logger = logging.getLogger(__name__)


class Carrier(str, Enum):
    """Supported carriers. UNDEFINED is the "nothing picked yet" value."""

    UNDEFINED = 'undefined'
    DHL = 'dhl'
    GLS = 'gls'
    UPS = 'ups'
    INPOST = 'inpost'

    @property
    def label(self):
        return CARRIER_LABELS[self]


CARRIER_LABELS = {
    Carrier.UNDEFINED: 'Not selected',
    Carrier.DHL: 'DHL',
    Carrier.GLS: 'GLS',
    Carrier.UPS: 'UPS',
    Carrier.INPOST: 'InPost',
}

# Carriers a user can pick, in the order they are offered
CARRIER_OPTIONS = (
    Carrier.DHL,
    Carrier.GLS,
    Carrier.INPOST,
    Carrier.UPS,
)

# Most specific tracking number formats first
DETECTION_PRIORITY = (
    Carrier.UPS,
    Carrier.INPOST,
    Carrier.DHL,
    Carrier.GLS,
)


def build_adapters(session, settings):
    """
    Construct one adapter per carrier.

    Args:
        session (requests.Session): Transport shared by all adapters
        settings (TrackerSettings): Credentials and transport settings

    Returns:
        dict: Carrier -> CarrierAPI
    """
    timeout = settings.http_timeout
    return {
        Carrier.DHL: DhlAPI(session, settings.dhl_api_key, timeout=timeout),
        Carrier.GLS: GlsAPI(session, settings.gls_locale, timeout=timeout),
        Carrier.INPOST: InPostAPI(session, timeout=timeout),
        Carrier.UPS: UpsAPI(session, settings.ups_client_id, settings.ups_client_secret, timeout=timeout),
    }


class CarrierRegistry:
    """Routes lookups for a carrier to its adapter."""

    def __init__(self, adapters):
        """
        Args:
            adapters (dict): Carrier -> CarrierAPI, one entry per selectable carrier

        Raises:
            CarrierConfigurationError: The adapters don't match CARRIER_OPTIONS
        """
        missing = [carrier.value for carrier in CARRIER_OPTIONS if carrier not in adapters]
        unexpected = [str(carrier) for carrier in adapters if carrier not in CARRIER_OPTIONS]
        if missing or unexpected:
            raise CarrierConfigurationError(
                f"Carrier adapters out of sync (missing: {missing}, unexpected: {unexpected})"
            )
        self._adapters = dict(adapters)

    def adapter_for(self, carrier):
        """
        Get the adapter for a carrier.

        Args:
            carrier (Carrier or str): Carrier or its value, e.g. 'dhl'

        Returns:
            CarrierAPI: The carrier's adapter

        Raises:
            CarrierConfigurationError: No adapter is registered for the carrier
        """
        try:
            return self._adapters[Carrier(carrier)]
        except (KeyError, ValueError):
            raise CarrierConfigurationError(f"No adapter registered for carrier {carrier!r}") from None

    async def lookup(self, tracking_id, postal_code, carrier):
        """
        Look up a parcel with the given carrier.

        Args:
            tracking_id (str): Tracking number as entered by the user
            postal_code (str): Recipient postal code, or None
            carrier (Carrier): Carrier to ask

        Returns:
            Parcel: The normalized parcel

        Raises:
            ParcelNonExistentException: The carrier has no such parcel
            NetworkException: The carrier could not be reached
            CarrierConfigurationError: No adapter is registered for the carrier
        """
        adapter = self.adapter_for(carrier)
        tracking_id = normalize_tracking_number(tracking_id)

        postal_code = (postal_code or '').strip() or None
        if not adapter.accepts_post_code:
            postal_code = None

        logger.info(f"Looking up {tracking_id} with {adapter.name}")
        return await adapter.get_parcel(tracking_id, postal_code)

    def detect_carrier(self, tracking_id):
        """
        Suggest carriers whose tracking number format matches.

        Several carriers can accept the same format, all of them are returned.

        Args:
            tracking_id (str): Tracking number as entered by the user

        Returns:
            list: Matching carriers, most specific format first
        """
        tracking_id = normalize_tracking_number(tracking_id)
        candidates = [
            carrier for carrier in DETECTION_PRIORITY
            if self._adapters[carrier].accepts_format(tracking_id)
        ]

        if candidates:
            logger.debug(f"Carrier candidates for {tracking_id}: {[c.label for c in candidates]}")
        else:
            logger.warning(f"Could not detect carrier for tracking number: {tracking_id}")
        return candidates


def create_registry(settings=None, session=None):
    """
    Build the registry at process start.

    Args:
        settings (TrackerSettings, optional): Defaults to settings loaded from the environment
        session (requests.Session, optional): Defaults to create_session()

    Returns:
        CarrierRegistry: Registry with every carrier wired up
    """
    if settings is None:
        settings = load_settings()
    if session is None:
        session = create_session()
    return CarrierRegistry(build_adapters(session, settings))


def create_session():
    """
    Open the shared transport for all adapters.

    Lookups run concurrently on worker threads and must not see each
    other's state, so the session never stores cookies.

    Returns:
        requests.Session: Session with cookies disabled
    """
    session = requests.Session()
    session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
    return session
