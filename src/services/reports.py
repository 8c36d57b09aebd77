"""
Slot display formatting and Excel capacity reports.
"""

from datetime import date, datetime
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from core.config import CAPACITY_REPORT_HEADERS, DATE_FORMAT
from models.schedule import SlotDescriptor
from services.projects import ProjectSummary

TBD = "TBD"


def format_date_display(d: date) -> str:
    """Format date as 'Sunday, June 1, 2025' (platform-safe, no zero-padding)."""
    return f"{d.strftime('%A, %B')} {d.day}, {d.year}"


def format_time_range(start_time: str | None, end_time: str | None) -> str:
    """'09:00 - 12:00', or just the start time when there is no end."""
    if start_time and end_time:
        return f"{start_time} - {end_time}"
    return start_time or TBD


def describe_slot(slot: SlotDescriptor | None) -> dict[str, str]:
    """
    Human-readable date and time of a slot, for confirmation messages.

    Returns 'TBD' fields when the slot is unknown or its date is unparseable.
    """
    if slot is None:
        return {"date": TBD, "time": TBD, "time_range": TBD}

    try:
        date_str = format_date_display(datetime.strptime(slot.date, DATE_FORMAT).date())
    except (TypeError, ValueError):
        date_str = TBD

    return {
        "date": date_str,
        "time": slot.start_time or TBD,
        "time_range": format_time_range(slot.start_time, slot.end_time),
    }


# =============================================================================
# EXCEL CAPACITY REPORT
# =============================================================================


def write_capacity_detail_sheet(ws, summaries: list[ProjectSummary]):
    """
    Write one row per (project, slot) with capacity, confirmed and remaining.

    Columns follow CAPACITY_REPORT_HEADERS.
    """
    for col_idx, header in enumerate(CAPACITY_REPORT_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    row_idx = 2
    for summary in summaries:
        project = summary.project
        seen = set()
        for slot in summary.slots:
            # Duplicate schedule ids share one conflated tally; list it once
            if slot.schedule_id in seen:
                continue
            seen.add(slot.schedule_id)

            capacity = summary.capacity[slot.schedule_id]
            display = describe_slot(slot)
            row_data = [
                project.id,
                project.title,
                summary.status.value,
                slot.schedule_id,
                slot.label,
                display["date"],
                display["time_range"],
                capacity.capacity,
                capacity.confirmed,
                capacity.remaining,
            ]
            for col_idx, value in enumerate(row_data, start=1):
                ws.cell(row=row_idx, column=col_idx, value=value)
            row_idx += 1

    return row_idx - 1


def write_capacity_totals_sheet(ws, detail_sheet_name: str, last_row: int):
    """
    Write per-status totals using SUMIF formulas over the detail sheet.

    Rows: one per status found in the detail sheet plus a grand total.
    """
    headers = ["Status", "Capacity", "Confirmed", "Remaining"]
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    # Detail sheet columns: C=Status, H=Capacity, I=Confirmed, J=Remaining
    status_col = "C"
    value_cols = ["H", "I", "J"]
    first_row = 2
    last_row = max(last_row, first_row)

    statuses = ["upcoming", "in-progress", "completed", "cancelled"]
    for row_idx, status in enumerate(statuses, start=2):
        ws.cell(row=row_idx, column=1, value=status)
        for col_offset, value_col in enumerate(value_cols, start=2):
            formula = (
                f"=SUMIF('{detail_sheet_name}'!${status_col}${first_row}:${status_col}${last_row},"
                f'"{status}",'
                f"'{detail_sheet_name}'!${value_col}${first_row}:${value_col}${last_row})"
            )
            ws.cell(row=row_idx, column=col_offset, value=formula)

    total_row = len(statuses) + 2
    ws.cell(row=total_row, column=1, value="Total").font = Font(bold=True)
    for col in range(2, 5):
        letter = get_column_letter(col)
        ws.cell(row=total_row, column=col, value=f"=SUM({letter}2:{letter}{total_row - 1})")


def create_capacity_workbook(summaries: list[ProjectSummary]) -> Workbook:
    """
    Create the capacity report workbook.

    Sheet 1: "Slot Capacity" - one row per bookable slot
    Sheet 2: "Totals" - SUMIF totals per project status
    """
    wb = Workbook()

    ws_detail = wb.active
    ws_detail.title = "Slot Capacity"
    last_row = write_capacity_detail_sheet(ws_detail, summaries)

    ws_totals = wb.create_sheet(title="Totals")
    write_capacity_totals_sheet(ws_totals, ws_detail.title, last_row)

    return wb


def save_capacity_report(summaries: list[ProjectSummary], output_path: Path) -> Path:
    """Write the capacity workbook to ``output_path``."""
    wb = create_capacity_workbook(summaries)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
    return output_path
