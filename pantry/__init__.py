"""Grocery photo analysis for the pantry tracker."""

from .categories import (
    CATEGORIES,
    CATEGORY_EXPIRY_DAYS,
    Category,
    categorize_grocery_item,
    estimate_expiry,
)
from .config import PantryConfig, VisionConfig, load_config
from .gateway import VisionAnalysisGateway
from .vision import (
    DetectedItem,
    DetectionResult,
    ProviderFailure,
    ProviderSuccess,
    VisionProvider,
    create_provider,
    create_providers,
)

__all__ = [
    "VisionAnalysisGateway",
    "VisionProvider",
    "DetectedItem",
    "DetectionResult",
    "ProviderSuccess",
    "ProviderFailure",
    "create_provider",
    "create_providers",
    "Category",
    "CATEGORIES",
    "CATEGORY_EXPIRY_DAYS",
    "categorize_grocery_item",
    "estimate_expiry",
    "PantryConfig",
    "VisionConfig",
    "load_config",
]
