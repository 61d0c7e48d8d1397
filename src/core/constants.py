"""Core constants used across benchdb modules.

This module centralizes field key sets, keyword tables, and defaults.
Keeping values here avoids magic literals in parsing and classification.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".benchdb")
DEFAULT_DATABASE_FILE_NAME = "bench.db"

NULL_LITERAL = "null"
NAN_LITERAL = "nan"
PERFORMANCE_SAMPLE_DELIMITERS = ("/", ",")

APP_DETAILS_KEYS = ("app", "updated", "hash", "url")
SYSTEM_INFO_KEYS = ("arch", "cpu", "system", "release", "python")
LIBRARY_KEYS = ("torch", "xformers", "diffusers", "transformers")
DEVICE_KEYS = ("device", "driver", "gpu_chip")

# Ordered brand keyword groups, first matching group wins.
GPU_BRAND_KEYWORDS = (
    ("NVIDIA", ("nvidia", "geforce", "rtx", "gtx")),
    ("AMD", ("amd", "radeon", "rx ")),
    ("Intel", ("intel", "uhd", "iris")),
)
GPU_LAPTOP_KEYWORDS = ("laptop", "mobile")

# Ordered app-name categories, first matching category wins.
APP_NAME_CATEGORIES = (
    "automatic1111",
    "vladmandic",
    "stable_diffusion",
    "null_app_name_null_url",
)
APP_URL_PATTERNS = {
    "automatic1111": "automatic1111",
    "vladmandic": "vladmandic",
    "stable_diffusion": "stable-diffusion-webui",
}

STAGE_NAMES = (
    "performance",
    "app_details",
    "system_info",
    "libraries",
    "gpu",
    "run_details",
)
ALL_STAGES_ALIAS = "all"

RAW_RUN_FIELDS = (
    "timestamp",
    "vram_usage",
    "info",
    "system_info",
    "model_info",
    "device_info",
    "xformers",
    "model_name",
    "user",
    "notes",
)

RUN_SPEC_VERSION = 1
