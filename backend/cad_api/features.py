"""Optional CAD features and their lookup."""
from enum import Enum
from typing import Dict, Iterable, Optional


class Feature(str, Enum):
    """Features an owner can switch on or off."""
    CUSTOM_TEXTFIELD_VALUES = "CUSTOM_TEXTFIELD_VALUES"
    ACTIVE_WARRANTS = "ACTIVE_WARRANTS"
    CALLS_911 = "CALLS_911"
    LEO_TICKETS = "LEO_TICKETS"
    COMMON_CITIZEN_CARDS = "COMMON_CITIZEN_CARDS"


# Features that stay off until explicitly enabled
DEFAULT_DISABLED_FEATURES = {
    Feature.CUSTOM_TEXTFIELD_VALUES,
    Feature.COMMON_CITIZEN_CARDS,
}


def is_feature_enabled(
    features: Optional[Iterable],
    feature: Feature,
    default_return: bool = True,
) -> bool:
    """
    Check whether a feature is enabled.

    Args:
        features: CadFeature rows (anything with ``feature`` and ``is_enabled``)
        feature: The feature to look up
        default_return: Returned when no row exists for the feature

    Returns:
        The stored toggle, or ``default_return``
    """
    for stored in features or []:
        if stored.feature == feature:
            return bool(stored.is_enabled)
    return default_return


def get_enabled_features(features: Optional[Iterable]) -> Dict[str, bool]:
    """Resolve every feature to its effective state."""
    features = list(features or [])
    return {
        feature.value: is_feature_enabled(
            features,
            feature,
            default_return=feature not in DEFAULT_DISABLED_FEATURES,
        )
        for feature in Feature
    }
