#!/usr/bin/env python3
"""
Carrier Detection Module

This module contains the tracking number format matchers that carrier
adapters combine to decide whether a tracking number could belong to them.
"""

import re


class FormatMatcher:
    """A single tracking number shape, backed by one full-match regex."""

    def __init__(self, name, pattern):
        self.name = name
        self.pattern = re.compile(pattern)

    def accepts(self, candidate):
        """
        Check whether a tracking number has this shape.

        Args:
            candidate (str): Tracking number, already normalized

        Returns:
            bool: True if the whole string matches
        """
        if not candidate:
            return False
        return self.pattern.fullmatch(candidate) is not None

    def __repr__(self):
        return f"FormatMatcher({self.name!r}, {self.pattern.pattern!r})"


# Define the shared tracking number shapes
DIGITS_11_FORMAT = FormatMatcher('11 digits', r'\d{11}')
DIGITS_12_FORMAT = FormatMatcher('12 digits', r'\d{12}')
DIGITS_18_FORMAT = FormatMatcher('18 digits', r'\d{18}')
DIGITS_24_FORMAT = FormatMatcher('24 digits', r'\d{24}')
EMS_FORMAT = FormatMatcher('EMS', r'[A-Z]{2}\d{9}[A-Z]{2}')      # UPU S10, e.g. EE123456789DE
UPS_FORMAT = FormatMatcher('UPS', r'1Z[0-9A-Z]{16}')             # 1Z + 16 chars
DHL_PARCEL_FORMAT = FormatMatcher('DHL parcel', r'(?:JJD|JVGL|3S|JV|JD)\d*')
GLS_TRACK_ID_FORMAT = FormatMatcher('GLS TrackID', r'[0-9A-Z]{8}')


def accepts_any(tracking_number, *matchers):
    """
    Check a tracking number against several shapes at once.

    Args:
        tracking_number (str): Tracking number, already normalized
        *matchers (FormatMatcher): Shapes to try

    Returns:
        bool: True if any of the matchers accepts the number
    """
    return any(matcher.accepts(tracking_number) for matcher in matchers)


def normalize_tracking_number(tracking_number):
    """
    Normalize a tracking number (remove spaces, dashes, dots, uppercase).

    Args:
        tracking_number (str): Raw tracking number as typed by the user

    Returns:
        str: Normalized tracking number
    """
    if not tracking_number:
        return ''
    return re.sub(r'[\s\-.]', '', tracking_number).upper()


def format_tracking_number(tracking_number):
    """
    Format tracking number for display.

    Args:
        tracking_number (str): The tracking number to format

    Returns:
        str: Properly formatted tracking number
    """
    tracking_number = normalize_tracking_number(tracking_number)

    # DHL Express style numbers read better as #### #### ##
    if re.fullmatch(r'\d{10}', tracking_number):
        return f"{tracking_number[:4]} {tracking_number[4:8]} {tracking_number[8:]}"

    return tracking_number
