"""Prometheus metrics for garage occupancy."""

from prometheus_client import Counter, Gauge, CollectorRegistry, generate_latest

# Create a custom registry to avoid conflicts with default metrics
REGISTRY = CollectorRegistry()

# Garage operations by kind and outcome
GARAGE_OPERATIONS = Counter(
    "garage_operations_total",
    "Total number of garage operations",
    ["operation", "outcome"],
    registry=REGISTRY,
)

# Per-level slot gauges
LEVEL_SLOTS_TOTAL = Gauge(
    "garage_level_slots_total",
    "Total number of slots on a level",
    ["level"],
    registry=REGISTRY,
)

LEVEL_SLOTS_FREE = Gauge(
    "garage_level_slots_free",
    "Number of free slots on a level",
    ["level"],
    registry=REGISTRY,
)

PARKED_VEHICLES = Gauge(
    "garage_parked_vehicles",
    "Number of vehicles currently parked",
    registry=REGISTRY,
)


def record_operation(operation: str, outcome: str) -> None:
    """Count a garage operation and its outcome."""
    GARAGE_OPERATIONS.labels(operation=operation, outcome=outcome).inc()


def update_level_slots(level: int, total: int, free: int) -> None:
    """Update slot gauges for one level."""
    LEVEL_SLOTS_TOTAL.labels(level=str(level)).set(total)
    LEVEL_SLOTS_FREE.labels(level=str(level)).set(free)


def clear_level_slots() -> None:
    """Drop every per-level series, e.g. before a new garage is laid out."""
    LEVEL_SLOTS_TOTAL.clear()
    LEVEL_SLOTS_FREE.clear()


def update_parked_vehicles(count: int) -> None:
    """Update the parked vehicle gauge."""
    PARKED_VEHICLES.set(count)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest(REGISTRY)
