#!/usr/bin/env python3
"""
Parcel Validation Module

Checks a new parcel entry before it gets saved: every required field is
filled in, and the chosen carrier actually knows the tracking number.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from carrier_registry import Carrier
from parcel_model import NetworkException, Parcel, ParcelNonExistentException

# Set up logging
logger = logging.getLogger(__name__)

# Field errors
NAME_REQUIRED = 'name_required'
TRACKING_ID_REQUIRED = 'tracking_id_required'
CARRIER_REQUIRED = 'carrier_required'
POSTAL_CODE_REQUIRED = 'postal_code_required'

# Lookup errors
NETWORK_FAILURE = 'network_failure'
PARCEL_DOESNT_EXIST = 'parcel_doesnt_exist'


@dataclass(frozen=True)
class SavedParcel:
    """What the storage layer persists for a parcel the user is following."""

    human_name: str
    tracking_id: str
    carrier: Carrier
    postal_code: Optional[str] = None


@dataclass(frozen=True)
class ParcelValidation:
    errors: Tuple[str, ...] = field(default_factory=tuple)
    saved_parcel: Optional[SavedParcel] = None
    parcel: Optional[Parcel] = None

    @property
    def is_valid(self):
        return not self.errors


async def validate_new_parcel(registry, human_name, tracking_id, carrier,
                              postal_code=None, needs_postal_code=False):
    """
    Validate a new parcel entry.

    Field checks run first and skip the lookup entirely when any fails.
    Otherwise the parcel is looked up once to make sure it exists.

    Args:
        registry (CarrierRegistry): Registry used for the lookup
        human_name (str): Name the user gave the parcel
        tracking_id (str): Tracking number
        carrier (Carrier): Chosen carrier
        postal_code (str, optional): Recipient postal code
        needs_postal_code (bool): Whether the user chose to specify a postal code

    Returns:
        ParcelValidation: Errors, or the record to save and the fetched parcel
    """
    errors = []
    if not (human_name or '').strip():
        errors.append(NAME_REQUIRED)
    if not (tracking_id or '').strip():
        errors.append(TRACKING_ID_REQUIRED)
    if carrier is None or carrier == Carrier.UNDEFINED:
        errors.append(CARRIER_REQUIRED)
    if needs_postal_code and not (postal_code or '').strip():
        errors.append(POSTAL_CODE_REQUIRED)

    if errors:
        return ParcelValidation(errors=tuple(errors))

    postal_code = postal_code.strip() if needs_postal_code else None

    try:
        parcel = await registry.lookup(tracking_id, postal_code, carrier)
    except NetworkException as e:
        logger.warning(f"Network exception during validation: {e}")
        return ParcelValidation(errors=(NETWORK_FAILURE,))
    except ParcelNonExistentException as e:
        logger.info(f"Rejected new parcel {tracking_id}: {e}")
        return ParcelValidation(errors=(PARCEL_DOESNT_EXIST,))

    saved_parcel = SavedParcel(
        human_name=human_name.strip(),
        tracking_id=tracking_id.strip(),
        carrier=Carrier(carrier),
        postal_code=postal_code,
    )
    return ParcelValidation(saved_parcel=saved_parcel, parcel=parcel)
