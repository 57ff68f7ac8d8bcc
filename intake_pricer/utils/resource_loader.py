"""Resource file (YAML) loader"""
import os
import yaml
from typing import Any, Dict
from functools import lru_cache

from intake_pricer.core.logging import logger


def get_resource_path(relative_path: str) -> str:
    """Absolute path of a bundled resource file"""
    # intake_pricer/utils/resource_loader.py -> intake_pricer/utils -> intake_pricer
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(base_dir, "resources", relative_path)


@lru_cache(maxsize=32)
def load_yaml_resource(relative_path: str) -> Dict[str, Any]:
    """Load and cache a YAML resource"""
    path = get_resource_path(relative_path)
    if not os.path.exists(path):
        logger.warning(f"Resource not found: {path}")
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load YAML resource {path}: {e}")
        return {}


def load_color_vocabulary() -> list[str]:
    """Ordered marketing color names (multi-word names first)"""
    data = load_yaml_resource("matching/colors.yaml")
    return list(data.get("colors", []))


def load_tier_rules() -> list[Dict[str, str]]:
    """Ordered (pattern, tier) rules; the first matching rule wins"""
    data = load_yaml_resource("matching/tiers.yaml")
    return list(data.get("rules", []))


def load_carrier_rules() -> Dict[str, Any]:
    """Carrier vocabulary and the lookup keys preferred when scanning for it"""
    data = load_yaml_resource("matching/carriers.yaml")
    return {
        "preferred_keys": list(data.get("preferred_keys", [])),
        "carriers": list(data.get("carriers", [])),
        "icloud_keys": list(data.get("icloud_keys", [])),
    }


def load_category_rules() -> Dict[str, Any]:
    """Category pattern groups per brand / condition / lock state"""
    data = load_yaml_resource("matching/categories.yaml")
    return {
        "excluded": list(data.get("excluded", [])),
        "brands": dict(data.get("brands", {})),
        "groups": dict(data.get("groups", {})),
    }
