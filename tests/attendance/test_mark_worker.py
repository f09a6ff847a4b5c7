from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from src.ward_attendance.ward_attendance.core.enums import GeofenceMode, GeoStatus, RejectionReason, Role
from src.ward_attendance.ward_attendance.core.exceptions import AttendanceRejected, StorageError
from src.ward_attendance.ward_attendance.geo.geofence import GeofencePolicy

# Ward 7 boundary in conftest spans lat 26.90-26.95, lng 75.75-75.80.
INSIDE_WARD_7 = (26.92, 75.77)
OUTSIDE_WARD_7 = (27.50, 76.50)


def test_mark_inside_ward_creates_valid_record(world, service, supervisor, fixed_now):
    lat, lng = INSIDE_WARD_7
    rec = service.mark_worker(
        supervisor, worker_id="w-1", ward_id=7, latitude=lat, longitude=lng, now=fixed_now, photo_url="/uploads/a.jpg"
    )

    assert rec.geo_status == GeoStatus.VALID
    assert rec.attendance_date == fixed_now.date()
    assert rec.checkin_time == fixed_now
    assert (rec.worker_id, rec.supervisor_id, rec.ward_id, rec.ulb_id, rec.eo_id) == ("w-1", 101, 7, "ulb-1", 500)
    assert rec.photo_url == "/uploads/a.jpg"
    assert world.attendance.get_for_worker_and_date("w-1", fixed_now.date()) == rec


def test_outside_ward_is_recorded_not_rejected(world, service, supervisor, fixed_now):
    lat, lng = OUTSIDE_WARD_7
    rec = service.mark_worker(supervisor, worker_id="w-1", ward_id=7, latitude=lat, longitude=lng, now=fixed_now)

    assert rec.geo_status == GeoStatus.OUTSIDE_WARD
    assert (rec.latitude, rec.longitude) == OUTSIDE_WARD_7
    assert world.attendance.count_for("w-1", fixed_now.date()) == 1


def test_ward_without_boundary_fails_open(world, service, supervisor, fixed_now):
    world.update_ward(7, boundary_coordinates="not-json")
    lat, lng = OUTSIDE_WARD_7
    rec = service.mark_worker(supervisor, worker_id="w-1", ward_id=7, latitude=lat, longitude=lng, now=fixed_now)
    assert rec.geo_status == GeoStatus.VALID


def test_fail_closed_mode_flags_missing_location(world, supervisor, fixed_now):
    svc = world.service(geofence=GeofencePolicy(mode=GeofenceMode.FAIL_CLOSED))
    rec = svc.mark_worker(supervisor, worker_id="w-1", ward_id=7, now=fixed_now)
    assert rec.geo_status == GeoStatus.OUTSIDE_WARD


MALFORMED_BOUNDARIES = [
    '[{"lat": 26.90, "lng": 75.75}, {"lat": 26.90, "lng": 75.80}, {"lat": 26.95, "lng": 75.80}]',
    [[26.90, 75.75], [26.90, 75.80], None],
    [[26.90], [26.95], [26.92]],
]


@pytest.mark.parametrize("boundary", MALFORMED_BOUNDARIES)
def test_malformed_boundary_vertices_fail_open(world, service, supervisor, fixed_now, boundary):
    world.update_ward(7, boundary_coordinates=boundary)
    lat, lng = OUTSIDE_WARD_7
    rec = service.mark_worker(supervisor, worker_id="w-1", ward_id=7, latitude=lat, longitude=lng, now=fixed_now)
    assert rec.geo_status == GeoStatus.VALID
    assert world.attendance.count_for("w-1", fixed_now.date()) == 1


def test_fail_closed_mode_flags_malformed_boundary(world, supervisor, fixed_now):
    world.update_ward(7, boundary_coordinates=MALFORMED_BOUNDARIES[0])
    svc = world.service(geofence=GeofencePolicy(mode=GeofenceMode.FAIL_CLOSED))
    lat, lng = INSIDE_WARD_7
    rec = svc.mark_worker(supervisor, worker_id="w-1", ward_id=7, latitude=lat, longitude=lng, now=fixed_now)
    assert rec.geo_status == GeoStatus.OUTSIDE_WARD


def test_second_mark_same_day_is_already_marked(world, service, supervisor, fixed_now):
    service.mark_worker(supervisor, worker_id="w-1", ward_id=7, now=fixed_now)

    with pytest.raises(AttendanceRejected) as exc:
        service.mark_worker(supervisor, worker_id="w-1", ward_id=7, now=fixed_now + timedelta(hours=1))

    assert exc.value.reason == RejectionReason.ALREADY_MARKED
    assert exc.value.reason.http_status == 409
    assert world.attendance.count_for("w-1", fixed_now.date()) == 1


def test_next_day_is_a_new_record(world, service, supervisor, fixed_now):
    service.mark_worker(supervisor, worker_id="w-1", ward_id=7, now=fixed_now)
    service.mark_worker(supervisor, worker_id="w-1", ward_id=7, now=fixed_now + timedelta(days=1))
    assert len(world.attendance.records) == 2


def test_concurrent_insert_is_reported_as_already_marked(world, service, supervisor, fixed_now):
    service.mark_worker(supervisor, worker_id="w-1", ward_id=7, now=fixed_now)
    world.attendance.stale_reads = True

    with pytest.raises(AttendanceRejected) as exc:
        service.mark_worker(supervisor, worker_id="w-1", ward_id=7, now=fixed_now)

    assert exc.value.reason == RejectionReason.ALREADY_MARKED
    world.attendance.stale_reads = False
    assert world.attendance.count_for("w-1", fixed_now.date()) == 1


@pytest.mark.parametrize("hh, mm", [(5, 59), (11, 1), (18, 0)])
def test_outside_window_is_rejected(world, service, supervisor, hh, mm):
    with pytest.raises(AttendanceRejected) as exc:
        service.mark_worker(supervisor, worker_id="w-1", ward_id=7, now=datetime(2026, 2, 2, hh, mm))

    assert exc.value.reason == RejectionReason.OUTSIDE_ATTENDANCE_WINDOW
    assert "06:00 and 11:00" in exc.value.message
    assert world.attendance.records == {}


@pytest.mark.parametrize("hh", [6, 11])
def test_window_bounds_are_accepted(service, supervisor, hh):
    rec = service.mark_worker(supervisor, worker_id="w-1", ward_id=7, now=datetime(2026, 2, 2, hh, 0))
    assert rec.checkin_time.hour == hh


def test_consistency_failure_is_checked_before_window(world, service, supervisor):
    caller = replace(supervisor, role=Role.EO)
    with pytest.raises(AttendanceRejected) as exc:
        service.mark_worker(caller, worker_id="w-1", ward_id=7, now=datetime(2026, 2, 2, 20, 0))
    assert exc.value.reason == RejectionReason.FORBIDDEN


def test_cross_ulb_denied_even_when_ward_and_role_pass(world, service, supervisor, fixed_now):
    world.add_worker("w-x", ulb_id="ulb-2")
    with pytest.raises(AttendanceRejected) as exc:
        service.mark_worker(supervisor, worker_id="w-x", ward_id=7, now=fixed_now)
    assert exc.value.reason == RejectionReason.CROSS_ULB_DENIED


def test_storage_failure_propagates(world, service, supervisor, fixed_now, monkeypatch):
    def broken_create(record):
        raise StorageError("connection lost")

    monkeypatch.setattr(world.attendance, "create", broken_create)
    with pytest.raises(StorageError):
        service.mark_worker(supervisor, worker_id="w-1", ward_id=7, now=fixed_now)
