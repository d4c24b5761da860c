"""FastAPI route definitions."""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Response

from ..metrics import get_metrics
from ..state.garage import Garage
from ..state.models import GarageSnapshot, OperationResult, Outcome, UnknownCategoryError
from .schemas import AvailabilityResponse, FullResponse, HealthResponse, ParkRequest

logger = logging.getLogger(__name__)

router = APIRouter()

# Dependencies injected at startup
_garage: Optional[Garage] = None
_start_time: datetime = datetime.now()

# Failure outcomes mapped to HTTP status codes
_FAILURE_STATUS = {
    Outcome.ALREADY_PARKED: 409,
    Outcome.NO_SPACE: 507,
    Outcome.NOT_FOUND: 404,
    Outcome.INCONSISTENT_RELEASE: 500,
}


def init_router(garage: Optional[Garage]) -> None:
    """
    Initialize router with dependencies.

    Args:
        garage: Garage instance to serve, or None to detach it
    """
    global _garage, _start_time

    _garage = garage
    _start_time = datetime.now()

    logger.info("API router initialized")


def _require_garage() -> Garage:
    if _garage is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return _garage


def _raise_for_failure(result: OperationResult) -> OperationResult:
    if not result.success:
        raise HTTPException(
            status_code=_FAILURE_STATUS.get(result.outcome, 400),
            detail=result.message,
        )
    return result


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Basic health information about the service."""
    uptime = (datetime.now() - _start_time).total_seconds()

    return HealthResponse(
        status="healthy",
        garage_ready=_garage is not None,
        uptime_seconds=uptime,
    )


@router.get("/status", response_model=GarageSnapshot)
def get_status() -> GarageSnapshot:
    """
    Get overall garage status.

    Returns per-level availability, totals, the number of parked vehicles
    and whether the garage is full.
    """
    return _require_garage().snapshot()


@router.get("/availability", response_model=AvailabilityResponse)
def get_availability() -> AvailabilityResponse:
    return AvailabilityResponse(levels=_require_garage().availability())


@router.get("/full", response_model=FullResponse)
def get_full() -> FullResponse:
    return FullResponse(is_full=_require_garage().is_full())


@router.post("/vehicles", response_model=OperationResult, status_code=201)
def park_vehicle(request: ParkRequest) -> OperationResult:
    """
    Park a vehicle.

    Responds 409 if the identifier is already parked, 507 if no level has
    room, and 422 for an unknown vehicle type.
    """
    garage = _require_garage()

    try:
        result = garage.park_by_name(request.identifier, request.category)
    except UnknownCategoryError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid vehicle: {e}")

    return _raise_for_failure(result)


@router.get("/vehicles/{identifier}", response_model=OperationResult)
def locate_vehicle(identifier: str) -> OperationResult:
    """
    Locate a parked vehicle.

    Args:
        identifier: Identifier the vehicle was parked under
    """
    return _raise_for_failure(_require_garage().locate(identifier))


@router.delete("/vehicles/{identifier}", response_model=OperationResult)
def unpark_vehicle(identifier: str) -> OperationResult:
    """Unpark a vehicle and free its slots."""
    result = _require_garage().unpark(identifier)
    if result.outcome == Outcome.INCONSISTENT_RELEASE:
        logger.error(f"Inconsistent release for '{identifier}'")
    return _raise_for_failure(result)


@router.get("/metrics")
def prometheus_metrics() -> Response:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format including:
    - garage_operations_total: Counter of operations by kind and outcome
    - garage_level_slots_total: Total slots per level
    - garage_level_slots_free: Free slots per level
    - garage_parked_vehicles: Number of vehicles currently parked
    """
    return Response(
        content=get_metrics(),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
