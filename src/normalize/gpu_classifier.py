"""GPU brand and laptop classification pass."""

from __future__ import annotations

from collections import Counter

from sqlalchemy import select

from core.logging_config import get_logger
from core.types import GpuBrand, GpuClassificationSummary, LaptopState
from store.database import DatabaseManager
from store.schema import Gpu
from transforms.gpu_rules import classify_brand, classify_laptop

_LOGGER = get_logger(__name__)


def classify_gpus(database: DatabaseManager) -> GpuClassificationSummary:
    """Recompute brand and laptop state for every GPU row.

    Every row is overwritten on each call, so repeated runs converge on
    the same values as long as device text is unchanged.

    Args:
        database: Target database.

    Returns:
        Brand and form-factor counts over all GPU rows.

    Raises:
        BenchStoreError: If the update transaction fails.
    """
    brand_counts: Counter[GpuBrand] = Counter()
    laptop_counts: Counter[LaptopState] = Counter()
    with database.transaction() as session:
        for gpu in session.scalars(select(Gpu).order_by(Gpu.id)).all():
            gpu.brand = classify_brand(gpu.device)
            gpu.laptop = classify_laptop(gpu.device)
            brand_counts[gpu.brand] += 1
            laptop_counts[gpu.laptop] += 1
    summary = GpuClassificationSummary(
        nvidia_count=brand_counts[GpuBrand.NVIDIA],
        amd_count=brand_counts[GpuBrand.AMD],
        intel_count=brand_counts[GpuBrand.INTEL],
        unknown_count=brand_counts[GpuBrand.UNKNOWN],
        laptop_count=laptop_counts[LaptopState.LAPTOP],
        desktop_count=laptop_counts[LaptopState.DESKTOP],
    )
    _LOGGER.info(
        "gpus_classified",
        nvidia_count=summary.nvidia_count,
        amd_count=summary.amd_count,
        intel_count=summary.intel_count,
        unknown_count=summary.unknown_count,
        laptop_count=summary.laptop_count,
        desktop_count=summary.desktop_count,
    )
    return summary
