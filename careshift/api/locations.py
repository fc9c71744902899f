"""
Locations API endpoints
"""

from fastapi import APIRouter, Depends, status
from typing import List
import structlog
import uuid

from careshift.api.schemas import (
    LocationCreate, LocationDeleted, LocationRead, LocationUpdate, LocationWithMessage,
)
from careshift.core.dependencies import get_current_user, get_location_service
from careshift.models.user import User
from careshift.services.locations import LocationService

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("", response_model=List[LocationRead])
async def list_locations(
    current_user: User = Depends(get_current_user),
    locations: LocationService = Depends(get_location_service),
):
    """List all work zones, newest first"""
    return locations.list_locations(current_user)


@router.post("", response_model=LocationWithMessage, status_code=status.HTTP_201_CREATED)
async def create_location(
    location_data: LocationCreate,
    current_user: User = Depends(get_current_user),
    locations: LocationService = Depends(get_location_service),
):
    """Create a new work zone"""
    location = locations.create_location(current_user, location_data.model_dump())
    return LocationWithMessage(
        location=LocationRead.model_validate(location),
        message="Location created successfully",
    )


@router.put("/{location_id}", response_model=LocationWithMessage)
async def update_location(
    location_id: uuid.UUID,
    location_data: LocationUpdate,
    current_user: User = Depends(get_current_user),
    locations: LocationService = Depends(get_location_service),
):
    """Update a work zone (creator or manager)"""
    location = locations.update_location(
        current_user, location_id, location_data.model_dump(exclude_unset=True)
    )
    return LocationWithMessage(
        location=LocationRead.model_validate(location),
        message="Location updated successfully",
    )


@router.delete("/{location_id}", response_model=LocationDeleted)
async def delete_location(
    location_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    locations: LocationService = Depends(get_location_service),
):
    """Delete a work zone; shifts recorded there keep their history"""
    detached = locations.delete_location(current_user, location_id)
    return LocationDeleted(message="Location deleted successfully", detached_shifts=detached)
