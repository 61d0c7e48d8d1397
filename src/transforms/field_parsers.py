"""Field parsers for raw benchmark run text.

Each parser turns one raw run field into a typed record. Text outside the
grammar becomes missing samples or unparsed tokens, so a malformed field
still yields a row. Parsers are pure functions with no storage access.
"""

from __future__ import annotations

import math
import re

from core.constants import (
    APP_DETAILS_KEYS,
    DEVICE_KEYS,
    LIBRARY_KEYS,
    NAN_LITERAL,
    NULL_LITERAL,
    PERFORMANCE_SAMPLE_DELIMITERS,
    SYSTEM_INFO_KEYS,
)
from core.types import (
    ParsedAppDetails,
    ParsedDevice,
    ParsedLibraries,
    ParsedPerformance,
    ParsedSystemInfo,
)
from transforms.key_value_fields import parse_key_value_field

_SAMPLE_SPLIT_PATTERN = re.compile(
    "|".join(re.escape(delimiter) for delimiter in PERFORMANCE_SAMPLE_DELIMITERS)
)


def parse_performance(raw_value: str | None) -> ParsedPerformance:
    """Parse a delimited list of iteration-rate samples.

    ``NaN``, non-numeric, and infinite tokens count as missing samples. The
    average covers valid samples only and is None when none remain.

    Args:
        raw_value: Raw ``vram_usage`` text such as ``"10.1/NaN/9.9"``.

    Returns:
        Parsed samples and their average.
    """
    if raw_value is None:
        return ParsedPerformance(raw_samples=None, samples=(), average=None)
    text = raw_value.strip()
    if not text or text.lower() == NULL_LITERAL:
        return ParsedPerformance(raw_samples=None, samples=(), average=None)
    samples: list[float] = []
    for token in _SAMPLE_SPLIT_PATTERN.split(text):
        sample = _parse_sample(token.strip())
        if sample is not None:
            samples.append(sample)
    average = sum(samples) / len(samples) if samples else None
    return ParsedPerformance(raw_samples=text, samples=tuple(samples), average=average)


def _parse_sample(token: str) -> float | None:
    """Parse one sample token, returning None for missing samples."""
    if not token or token.lower() == NAN_LITERAL:
        return None
    try:
        value = float(token)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_app_details(raw_value: str | None) -> ParsedAppDetails:
    """Parse an ``app: ... updated: ... hash: ... url: ...`` identity string."""
    parsed = parse_key_value_field(raw_value, APP_DETAILS_KEYS)
    return ParsedAppDetails(
        app_name=parsed.values["app"],
        updated=parsed.values["updated"],
        hash=parsed.values["hash"],
        url=parsed.values["url"],
        unparsed=parsed.unparsed,
    )


def parse_system_info(raw_value: str | None) -> ParsedSystemInfo:
    """Parse an ``arch: ... cpu: ... system: ...`` host string."""
    parsed = parse_key_value_field(raw_value, SYSTEM_INFO_KEYS)
    return ParsedSystemInfo(
        arch=parsed.values["arch"],
        cpu=parsed.values["cpu"],
        system=parsed.values["system"],
        release=parsed.values["release"],
        python=parsed.values["python"],
        unparsed=parsed.unparsed,
    )


def parse_libraries(raw_value: str | None) -> ParsedLibraries:
    """Parse a ``torch: ... xformers: ...`` model-info string.

    The xformers value here is the library-version entry only. The run-level
    xformers field is a separate value and is not consulted.
    """
    parsed = parse_key_value_field(raw_value, LIBRARY_KEYS)
    return ParsedLibraries(
        torch=parsed.values["torch"],
        xformers=parsed.values["xformers"],
        diffusers=parsed.values["diffusers"],
        transformers=parsed.values["transformers"],
        unparsed=parsed.unparsed,
    )


def parse_device(raw_value: str | None) -> ParsedDevice:
    """Parse a ``device: ... driver: ... gpu_chip: ...`` device string."""
    parsed = parse_key_value_field(raw_value, DEVICE_KEYS)
    return ParsedDevice(
        device=parsed.values["device"],
        driver=parsed.values["driver"],
        gpu_chip=parsed.values["gpu_chip"],
        unparsed=parsed.unparsed,
    )
