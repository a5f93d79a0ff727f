"""
Industry profiles.

Profiles are read once from industries.yaml and shared by every request.
They are immutable: the custom profile's prompt context is applied to a
per-request copy by resolve_industry(), never to the shared object.
"""

from __future__ import annotations
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Optional, Union
import logging

import yaml

from feedtrans.core.exceptions import ConfigurationError, InputValidationError
from feedtrans.core.models import IndustryProfile

logger = logging.getLogger(__name__)

CUSTOM_INDUSTRY_ID = "custom"
DEFAULT_INDUSTRIES_PATH = Path(__file__).parent / "industries.yaml"

_registry: Optional[Dict[str, IndustryProfile]] = None


def _profile_from_dict(data: Dict) -> IndustryProfile:
    try:
        return IndustryProfile(
            id=data["id"],
            name=data["name"],
            icon=data.get("icon", ""),
            description=data.get("description", ""),
            context=data.get("context") or "",
            glossary=MappingProxyType(dict(data.get("glossary") or {})),
            example_terms=tuple(data.get("example_terms") or ()),
        )
    except KeyError as e:
        raise ConfigurationError(
            f"Industry profile is missing required key {e}",
            config_key=str(e.args[0])
        ) from e


def load_industries(path: Optional[Union[str, Path]] = None) -> Dict[str, IndustryProfile]:
    """
    Load industry profiles from a YAML file.

    Args:
        path: YAML file (defaults to the bundled industries.yaml)

    Returns:
        Profiles keyed by id, in file order
    """
    path = Path(path) if path else DEFAULT_INDUSTRIES_PATH
    if not path.exists():
        raise FileNotFoundError(f"Industries file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid industries file {path}: {e}") from e

    profiles: Dict[str, IndustryProfile] = {}
    for entry in data.get("industries", []):
        profile = _profile_from_dict(entry)
        profiles[profile.id] = profile

    logger.debug(f"Loaded {len(profiles)} industry profiles from {path}")
    return profiles


def _get_registry() -> Dict[str, IndustryProfile]:
    global _registry
    if _registry is None:
        _registry = load_industries()
    return _registry


def list_industries() -> List[IndustryProfile]:
    return list(_get_registry().values())


def get_industry(industry_id: str) -> Optional[IndustryProfile]:
    """Shared profile for an id, or None if unknown."""
    return _get_registry().get(industry_id)


def resolve_industry(industry_id: str, custom_context: Optional[str] = None) -> IndustryProfile:
    """
    Profile to use for one request.

    A custom context only applies to the custom profile and is returned on a
    copy; the shared registry is left untouched.

    Raises:
        InputValidationError: If the id is unknown
    """
    profile = get_industry(industry_id)
    if profile is None:
        raise InputValidationError(
            "Unknown industry",
            field="industry",
            invalid_value=industry_id,
            valid_values=list(_get_registry())
        )

    if custom_context and industry_id == CUSTOM_INDUSTRY_ID:
        return profile.with_context(custom_context)
    return profile
