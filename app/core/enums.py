from enum import Enum


class ZoneType(str, Enum):
    CIRCLE = "circle"
    POLYGON = "polygon"

    def __str__(self):
        return self.value


class PricingType(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"

    def __str__(self):
        return self.value


class PricingSource(str, Enum):
    BASE = "base"
    ZONE_FIXED = "zone_fixed"
    ZONE_PERCENTAGE = "zone_percentage"
    OVERRIDE = "override"

    def __str__(self):
        return self.value
