"""Tests for slot display formatting and the Excel capacity report."""

from datetime import date

from openpyxl import load_workbook

from core.config import CAPACITY_REPORT_HEADERS
from core.database import insert_project, insert_signup
from models.schedule import SlotDescriptor
from scripts.create_capacity_report import generate_capacity_report
from services.projects import list_active_projects
from services.reports import create_capacity_workbook, describe_slot, format_date_display


def test_format_date_display():
    assert format_date_display(date(2025, 6, 1)) == "Sunday, June 1, 2025"


def test_describe_slot():
    slot = SlotDescriptor("2025-06-01-1", "2025-06-01", "13:00", "16:00", 4)

    assert describe_slot(slot) == {
        "date": "Sunday, June 1, 2025",
        "time": "13:00",
        "time_range": "13:00 - 16:00",
    }


def test_describe_unknown_slot():
    assert describe_slot(None) == {"date": "TBD", "time": "TBD", "time_range": "TBD"}
    bad_date = SlotDescriptor("x", "someday", "13:00", "", 4)
    assert describe_slot(bad_date) == {"date": "TBD", "time": "13:00", "time_range": "13:00"}


def test_workbook_rows(one_time_project, multi_day_project, make_signup, before_start):
    signups = [make_signup("proj-one", "oneTime") for _ in range(2)]
    summaries = list_active_projects([one_time_project, multi_day_project], signups, before_start)

    wb = create_capacity_workbook(summaries)
    ws = wb["Slot Capacity"]

    assert [c.value for c in ws[1]] == CAPACITY_REPORT_HEADERS
    assert ws.max_row == 1 + 1 + 3
    assert [c.value for c in ws[2]] == [
        "proj-one",
        "Park Cleanup",
        "upcoming",
        "oneTime",
        "One-time",
        "Sunday, June 1, 2025",
        "09:00 - 12:00",
        5,
        2,
        3,
    ]
    assert ws["E5"].value == "Day 2, Slot 1"

    totals = wb["Totals"]
    assert totals["A2"].value == "upcoming"
    assert totals["B2"].value.startswith("=SUMIF('Slot Capacity'!$C$2:$C$5")
    assert totals["A6"].value == "Total"


def test_generate_capacity_report(db_conn, db_path, tmp_path, one_time_project, make_signup, before_start):
    insert_project(db_conn, one_time_project)
    insert_signup(db_conn, make_signup("proj-one", "oneTime"))

    output = generate_capacity_report(db_path, tmp_path / "report.xlsx", now=before_start)

    ws = load_workbook(output)["Slot Capacity"]
    assert ws["A2"].value == "proj-one"
    assert ws["I2"].value == 1
    assert ws["J2"].value == 4
