"""
Configuration override loader.
Loads JSON files that adjust thresholds without editing engine_config.
"""

import copy
import json
from typing import Dict
from pathlib import Path


def merge_config(base: Dict, overrides: Dict) -> Dict:
    """
    Deep-merge overrides into a copy of a configuration dictionary.

    Nested dictionaries are merged key by key; any other value replaces the
    base value outright.

    Args:
        base: Configuration dictionary (left untouched)
        overrides: Values to apply on top of base

    Returns:
        New merged configuration dictionary
    """
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config_overrides(json_path: str, base: Dict) -> Dict:
    """
    Load a JSON override file and merge it into a configuration dictionary.

    Args:
        json_path: Path to JSON file containing overrides
        base: Configuration dictionary to merge into

    Returns:
        Merged configuration dictionary

    Example JSON:
        {"health_thresholds": {"good_max_dti": 0.40}}
    """
    config_file = Path(json_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config override file not found: {json_path}")

    with open(config_file, 'r', encoding='utf-8') as f:
        overrides = json.load(f)

    if not isinstance(overrides, dict):
        raise ValueError(f"Config override file must contain a JSON object: {json_path}")

    return merge_config(base, overrides)
