#!/usr/bin/env python3
"""
Multi-Carrier Parcel Tracker

This script:
1. Detects candidate carriers based on tracking number format
2. Queries the chosen (or first detected) carrier API for a tracking number
3. Prints the normalized status, properties and history

Usage:
    multi-carrier-tracker detect 1Z999AA10123456784 12345678901
    multi-carrier-tracker track 12345678901 --carrier gls --postal-code 10115
"""

import argparse
import asyncio
import logging

from carrier_detector import format_tracking_number
from carrier_registry import CARRIER_OPTIONS, Carrier, create_registry
from parcel_model import NetworkException, ParcelNonExistentException

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_FAILURE = 2


def setup_logging(verbose=False):
    """Set up logging the same way for every script run."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def format_parcel(parcel, carrier):
    """
    Render a parcel as printable lines.

    Args:
        parcel (Parcel): The parcel to render
        carrier (Carrier): Carrier the parcel was looked up with

    Returns:
        list: Lines of text
    """
    lines = [
        f"Parcel {parcel.id} ({carrier.label})",
        f"Status: {parcel.status.value.replace('_', ' ').capitalize()}",
    ]

    for key, value in parcel.properties.items():
        lines.append(f"{key.label}: {value}")

    if parcel.history:
        lines.append("History:")
        for item in parcel.history:
            lines.append(f"  {item.timestamp:%Y-%m-%d %H:%M}  {item.description} ({item.location})")
    else:
        lines.append("No tracking events yet")

    return lines


def detect(registry, tracking_numbers):
    """Print the candidate carriers for each tracking number."""
    for tracking_number in tracking_numbers:
        candidates = registry.detect_carrier(tracking_number)
        names = ', '.join(carrier.label for carrier in candidates) or 'UNKNOWN'
        print(f"{format_tracking_number(tracking_number)}: {names}")
    return EXIT_OK


def track(registry, tracking_number, carrier=None, postal_code=None):
    """
    Look up one tracking number and print the result.

    Returns:
        int: Exit code
    """
    if carrier is None:
        candidates = registry.detect_carrier(tracking_number)
        if not candidates:
            print(f"Could not detect the carrier for {tracking_number}, pass --carrier")
            return EXIT_FAILURE
        carrier = candidates[0]
        if len(candidates) > 1:
            others = ', '.join(c.label for c in candidates[1:])
            print(f"Assuming {carrier.label} (also possible: {others})")

    try:
        parcel = asyncio.run(registry.lookup(tracking_number, postal_code, carrier))
    except ParcelNonExistentException:
        print(f"{carrier.label} has no parcel {tracking_number}. Check the tracking number and try again.")
        return EXIT_NOT_FOUND
    except NetworkException:
        print(f"Could not reach {carrier.label}. Check your connection and try again.")
        return EXIT_FAILURE

    for line in format_parcel(parcel, carrier):
        print(line)
    return EXIT_OK


def build_parser():
    parser = argparse.ArgumentParser(description='Look up parcels across multiple carriers')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log carrier requests')
    subparsers = parser.add_subparsers(dest='command', required=True)

    detect_parser = subparsers.add_parser('detect', help='Suggest carriers for tracking numbers')
    detect_parser.add_argument('tracking_numbers', nargs='+')

    track_parser = subparsers.add_parser('track', help='Look up a parcel')
    track_parser.add_argument('tracking_number')
    track_parser.add_argument('--carrier', choices=[carrier.value for carrier in CARRIER_OPTIONS],
                              help='Carrier to ask (detected from the format by default)')
    track_parser.add_argument('--postal-code', help='Recipient postal code, required by some carriers')

    return parser


def main(argv=None, registry=None):
    """Main function to orchestrate the tracking process."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    if registry is None:
        registry = create_registry()

    if args.command == 'detect':
        return detect(registry, args.tracking_numbers)

    carrier = Carrier(args.carrier) if args.carrier else None
    return track(registry, args.tracking_number, carrier, args.postal_code)


if __name__ == "__main__":
    raise SystemExit(main())
