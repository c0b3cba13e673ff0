"""Resource health tiers and the inventory every new workspace starts with."""

from typing import Any, Dict, Iterable, List

from schemas import Number, ResourceItem

GOOD = "Good"
LOW = "Low"
CRITICAL = "Critical"

# (name, unit, threshold)
DEFAULT_RESOURCES = (
    ("Cement", "Bags", 100),
    ("Sand", "Tons", 50),
    ("Granite", "Tons", 30),
    ("Iron Rods", "Pieces", 250),
    ("Blocks", "Units", 1000),
)


def classify(quantity: Number, threshold: Number) -> str:
    if quantity <= threshold * 0.5:
        return CRITICAL
    if quantity <= threshold:
        return LOW
    return GOOD


def build_resource(name: str, quantity: Number, unit: str, threshold: Number) -> ResourceItem:
    return ResourceItem(
        name=name,
        quantity=quantity,
        unit=unit,
        threshold=threshold,
        status=classify(quantity, threshold),
    )


def default_resources() -> List[ResourceItem]:
    # Seeded stock starts as Low, not the Critical that quantity 0 classifies to.
    # The first quantity or threshold change reclassifies it.
    items = []
    for name, unit, threshold in DEFAULT_RESOURCES:
        item = build_resource(name, 0, unit, threshold)
        item.status = LOW
        items.append(item)
    return items


def statistics(resources: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    resources = list(resources)
    return {
        "total": len(resources),
        "critical": sum(1 for r in resources if r.get("status") == CRITICAL),
        "low": sum(1 for r in resources if r.get("status") == LOW),
        "good": sum(1 for r in resources if r.get("status") == GOOD),
        "totalQuantity": sum(r.get("quantity", 0) for r in resources),
    }
