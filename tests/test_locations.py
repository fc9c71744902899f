"""
Location registry tests
"""

import uuid

import pytest

from careshift.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from careshift.services.locations import validate_zone_fields


def test_create_location(location_service, careworker, site_fields):
    location = location_service.create_location(careworker, site_fields)

    assert location.id is not None
    assert location.created_by == careworker.id
    assert location.radius == 3
    assert location.radius_meters == 3000


@pytest.mark.parametrize("field,value,message", [
    ("latitude", 91, "Latitude must be between -90 and 90"),
    ("latitude", -90.5, "Latitude must be between -90 and 90"),
    ("longitude", 180.1, "Longitude must be between -180 and 180"),
    ("radius", 0, "Radius must be greater than 0"),
    ("radius", -1, "Radius must be greater than 0"),
    ("name", "", "All fields are required"),
    ("start_time", None, "All fields are required"),
])
def test_invalid_fields_are_rejected(site_fields, field, value, message):
    site_fields[field] = value
    with pytest.raises(ValidationError) as exc:
        validate_zone_fields(site_fields)
    assert exc.value.message == message


def test_extreme_but_valid_values_are_accepted(location_service, careworker, site_fields):
    site_fields.update(latitude=90, longitude=180, radius=0.1)
    location = location_service.create_location(careworker, site_fields)
    assert location.latitude == 90
    assert location.longitude == 180
    assert location.radius == 0.1


def test_zero_coordinates_are_not_missing(site_fields):
    site_fields.update(latitude=0, longitude=0)
    validate_zone_fields(site_fields)


def test_list_is_newest_first(location_service, careworker, site_fields):
    location_service.create_location(careworker, dict(site_fields, name="First"))
    location_service.create_location(careworker, dict(site_fields, name="Second"))

    names = [loc.name for loc in location_service.list_locations(careworker)]
    assert names == ["Second", "First"]


def test_partial_update_is_revalidated(location_service, careworker, site_fields):
    location = location_service.create_location(careworker, site_fields)

    updated = location_service.update_location(careworker, location.id, {"radius": 1.5})
    assert updated.radius == 1.5
    assert updated.name == "Main Site"

    with pytest.raises(ValidationError):
        location_service.update_location(careworker, location.id, {"latitude": 91})


def test_only_creator_or_manager_may_change(
    location_service, careworker, other_careworker, manager_user, site_fields
):
    location = location_service.create_location(careworker, site_fields)

    with pytest.raises(PermissionDeniedError) as exc:
        location_service.update_location(other_careworker, location.id, {"name": "Taken"})
    assert exc.value.message == "Permission denied"

    with pytest.raises(PermissionDeniedError):
        location_service.delete_location(other_careworker, location.id)

    updated = location_service.update_location(manager_user, location.id, {"name": "Renamed"})
    assert updated.name == "Renamed"


def test_update_missing_location(location_service, careworker):
    with pytest.raises(NotFoundError):
        location_service.update_location(careworker, uuid.uuid4(), {"name": "x"})


def test_delete_detaches_shifts(location_service, lifecycle, careworker, clock, site_fields):
    location = location_service.create_location(careworker, site_fields)
    shift = lifecycle.start_shift(careworker.id, location_id=location.id)
    clock.advance(hours=1)
    lifecycle.end_shift(careworker.id)

    location_id = location.id
    detached = location_service.delete_location(careworker, location_id)

    assert detached == 1
    assert location_service.zone_for_shift(location_id) is None
    kept = lifecycle.shifts.get(shift.id)
    assert kept.location_id is None
    assert kept.total_hours == 1.0
