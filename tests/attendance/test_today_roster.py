from __future__ import annotations

from datetime import datetime

from src.ward_attendance.ward_attendance.core.enums import GeoStatus, RosterStatus


def test_roster_before_cutoff_shows_not_marked(world, supervisor):
    svc = world.service()
    svc.mark_worker(supervisor, worker_id="w-1", ward_id=7, latitude=26.92, longitude=75.77, now=datetime(2026, 2, 2, 7, 15))

    summary = svc.get_today_roster(supervisor, now=datetime(2026, 2, 2, 8, 0))

    by_id = {w.worker_id: w for w in summary.workers}
    assert by_id["w-1"].status == RosterStatus.PRESENT
    assert by_id["w-1"].geo_status == GeoStatus.VALID
    assert by_id["w-1"].checkin_time == datetime(2026, 2, 2, 7, 15)
    assert by_id["w-2"].status == RosterStatus.NOT_MARKED
    assert (summary.present, summary.absent, summary.not_marked, summary.total_workers) == (1, 0, 1, 2)
    assert summary.attendance_pct == 50


def test_roster_after_cutoff_shows_absent(world, supervisor):
    svc = world.service()
    svc.mark_worker(supervisor, worker_id="w-2", ward_id=7, now=datetime(2026, 2, 2, 8, 0))

    summary = svc.get_today_roster(supervisor, now=datetime(2026, 2, 2, 9, 0))

    data = summary.to_dict()
    assert data["present"] == 1
    assert data["absent"] == 1
    assert data["not_marked"] == 0
    statuses = {w["worker_id"]: w["status"] for w in data["workers"]}
    assert statuses == {"w-1": "ABSENT", "w-2": "PRESENT"}


def test_yesterdays_records_do_not_count(world, supervisor):
    svc = world.service()
    svc.mark_all_present(supervisor, now=datetime(2026, 2, 1, 8, 0))

    summary = svc.get_today_roster(supervisor, now=datetime(2026, 2, 2, 6, 30))

    assert summary.present == 0
    assert summary.attendance_date.isoformat() == "2026-02-02"


def test_empty_roster_has_zero_percent(world, supervisor):
    world.workers.workers.clear()
    summary = world.service().get_today_roster(supervisor, now=datetime(2026, 2, 2, 10, 0))
    assert summary.total_workers == 0
    assert summary.attendance_pct == 0


def test_custom_absent_cutoff(world, supervisor):
    summary = world.service(absent_cutoff_hour=7).get_today_roster(supervisor, now=datetime(2026, 2, 2, 7, 5))
    assert summary.absent == 2


def test_roster_entry_carries_worker_mobile(world, supervisor):
    world.add_worker("w-3", mobile="9876543210")

    data = world.service().get_today_roster(supervisor, now=datetime(2026, 2, 2, 8, 0)).to_dict()

    mobiles = {w["worker_id"]: w["mobile"] for w in data["workers"]}
    assert mobiles == {"w-1": None, "w-2": None, "w-3": "9876543210"}
