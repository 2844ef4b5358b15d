#!/usr/bin/env python3
"""
Parcel Model Module

Canonical, carrier-independent parcel types every carrier adapter
normalizes into, plus the errors a lookup can fail with.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple

# Set up logging
logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = "Unknown location"


class Status(str, Enum):
    """Canonical delivery states."""

    UNKNOWN = "unknown"
    PREADVICE = "preadvice"
    IN_TRANSIT = "in_transit"
    CUSTOMS = "customs"
    IN_WAREHOUSE = "in_warehouse"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERY_FAILURE = "delivery_failure"
    DELIVERED = "delivered"


class ParcelProperty(str, Enum):
    """Fixed set of extra properties a carrier may report."""

    WEIGHT = "weight"
    ETA = "eta"
    DELIVERY_TIME = "delivery_time"

    @property
    def label(self):
        return _PROPERTY_LABELS[self]


_PROPERTY_LABELS = {
    ParcelProperty.WEIGHT: "Weight",
    ParcelProperty.ETA: "Estimated delivery",
    ParcelProperty.DELIVERY_TIME: "Delivered at",
}


@dataclass(frozen=True)
class ParcelHistoryItem:
    """One tracking event as reported by the carrier."""

    description: str
    timestamp: datetime
    location: str = UNKNOWN_LOCATION


@dataclass(frozen=True)
class Parcel:
    """
    Normalized result of a single lookup.

    ``id`` is the carrier's own shipment id and can differ from the code the
    user typed in. ``history`` keeps the order the carrier reported it in.
    """

    id: str
    history: Tuple[ParcelHistoryItem, ...]
    status: Status
    properties: Mapping[ParcelProperty, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # Accept any iterable of events and any mapping, store read-only copies
        object.__setattr__(self, 'history', tuple(self.history))
        object.__setattr__(self, 'properties', MappingProxyType(dict(self.properties)))

    @property
    def latest_event(self):
        """Return the first history entry, or None for an empty history."""
        return self.history[0] if self.history else None


class ParcelNonExistentException(Exception):
    """The carrier has no record of the parcel, or the lookup failed carrier-side."""

    def __init__(self, tracking_id=None, reason=None):
        self.tracking_id = tracking_id
        self.reason = reason
        message = f"Parcel {tracking_id} does not exist" if tracking_id else "Parcel does not exist"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NetworkException(Exception):
    """The carrier could not be reached at all."""


class CarrierConfigurationError(Exception):
    """A carrier has no adapter registered for it."""


def log_unknown_status(carrier_name, raw_status):
    """
    Record a carrier status code that has no canonical mapping yet.

    Args:
        carrier_name (str): Carrier the code came from
        raw_status (str): The unmapped status value

    Returns:
        Status: Always Status.UNKNOWN
    """
    logger.warning(f"Unknown status from {carrier_name}: {raw_status!r}")
    return Status.UNKNOWN
