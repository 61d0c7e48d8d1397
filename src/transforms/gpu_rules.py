"""GPU brand and form-factor rules.

Keyword tables live in ``core.constants``; this module only applies them.
"""

from __future__ import annotations

from core.constants import GPU_BRAND_KEYWORDS, GPU_LAPTOP_KEYWORDS
from core.types import GpuBrand, LaptopState


def classify_brand(device: str | None) -> GpuBrand:
    """Return the first brand whose keyword group matches the device text.

    Args:
        device: Device description, possibly None.

    Returns:
        Matched brand, or UNKNOWN when no group matches.
    """
    if not device:
        return GpuBrand.UNKNOWN
    lowered = device.lower()
    for brand_value, keywords in GPU_BRAND_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return GpuBrand(brand_value)
    return GpuBrand.UNKNOWN


def classify_laptop(device: str | None) -> LaptopState:
    """Return LAPTOP when a laptop keyword appears, else DESKTOP."""
    lowered = (device or "").lower()
    if any(keyword in lowered for keyword in GPU_LAPTOP_KEYWORDS):
        return LaptopState.LAPTOP
    return LaptopState.DESKTOP
