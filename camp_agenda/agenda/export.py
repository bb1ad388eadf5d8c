"""CSV synthesis for agenda exports."""

from __future__ import annotations

import csv
import io
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from camp_agenda.agenda.types import AgendaDay, Clinician, Location

CSV_COLUMNS = (
    "Day",
    "Date",
    "Start Time",
    "End Time",
    "Title",
    "Type",
    "Location",
    "Clinician",
    "Additional Staff",
    "Status",
)


@dataclass(frozen=True)
class ExportResult:
    csv_text: str
    session_count: int
    path: Path | None = None


def export_filename(camp_id: int) -> str:
    return f"agenda_camp_{camp_id}.csv"


def count_sessions(days: Sequence[AgendaDay | None]) -> int:
    return sum(len([item for item in day.items if item is not None]) for day in days if day is not None)


def build_agenda_csv(
    days: Sequence[AgendaDay | None],
    clinicians: Sequence[Clinician] = (),
    locations: Sequence[Location] = (),
) -> ExportResult:
    """Build the export CSV from agenda days.

    The day number is written bare; every other field is double-quoted with
    embedded quotes doubled. Type and status are the raw wire values. None
    days and items are skipped.

    Args:
        days: Agenda days as returned by the export endpoint
        clinicians: Camp clinicians, for name resolution
        locations: Camp locations, for name resolution

    Returns:
        ExportResult with the CSV text and the number of session rows
    """
    clinician_names = {c.id: c.name for c in clinicians}
    location_names = {loc.id: loc.name for loc in locations}

    buffer = io.StringIO()
    buffer.write(",".join(CSV_COLUMNS) + "\n")
    # Day stays numeric so it is written bare; every string field is quoted
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")

    session_count = 0
    for day in days:
        if day is None:
            continue
        for item in day.items:
            if item is None:
                continue
            fields = [
                day.date.isoformat(),
                item.start_time or "",
                item.end_time or "",
                item.title or "",
                item.session_type or "",
                location_names.get(item.location_id, "") if item.location_id else "",
                clinician_names.get(item.clinician_id, "") if item.clinician_id else "",
                ", ".join(member.name for member in item.staff_assignments),
                item.status or "",
            ]
            writer.writerow([day.day, *fields])
            session_count += 1

    return ExportResult(csv_text=buffer.getvalue(), session_count=session_count)


def write_export(result: ExportResult, camp_id: int, export_dir: str | Path) -> ExportResult:
    """Write the CSV under export_dir and return the result with its path."""
    directory = Path(export_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(camp_id)
    path.write_text(result.csv_text, encoding="utf-8")
    logger.info(f"[EXPORT] Wrote {result.session_count} sessions to {path}")
    return ExportResult(csv_text=result.csv_text, session_count=result.session_count, path=path)
