from __future__ import annotations

from .models import LocatorQuality

RULE_QUALITY: dict[str, LocatorQuality] = {
    "id": LocatorQuality("Excellent", "ID"),
    "test_id": LocatorQuality("Excellent", "Test ID"),
    "placeholder": LocatorQuality("Excellent", "Placeholder"),
    "name": LocatorQuality("Good", "Name"),
    "aria_label": LocatorQuality("Good", "Aria Label"),
    "role": LocatorQuality("Good", "Role"),
    "class": LocatorQuality("Good", "Unique Class"),
    "href": LocatorQuality("Good", "Href"),
    "text": LocatorQuality("Good", "Text Content"),
    "type": LocatorQuality("Fair", "Type Attribute"),
    "structural": LocatorQuality("Fair", "Generic"),
}

_FALLBACK_QUALITY = RULE_QUALITY["structural"]


def rate_rule(rule: str) -> LocatorQuality:
    return RULE_QUALITY.get(rule, _FALLBACK_QUALITY)
