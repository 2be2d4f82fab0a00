"""
Plain-text rendering of a CalendarView for the terminal.
"""

from datetime import date

from backend.config import Config
from views.layout import CalendarView, DayCell, day_heading, week_header
from views.types import Granularity, ValidatedEvent


CELL_WIDTH = 16
LABEL_WIDTH = 8


def render(view: CalendarView, config: Config, today: date) -> str:
    """Render any granularity; returns the full text block."""
    lines = [view.label, ""]

    if view.granularity == Granularity.MONTH:
        lines.extend(_render_month(view, config))
    elif view.granularity == Granularity.AGENDA:
        lines.extend(_render_agenda(view, config, today))
    else:
        lines.extend(_render_hours(view, config))

    if view.is_empty:
        lines.append("")
        lines.append(config.labels.no_events)

    if view.invalid:
        lines.append("")
        lines.append(config.labels.invalid_events.format(
            view.invalid_count, ", ".join(view.invalid_ids)))

    return "\n".join(lines)


def _fit(text: str, width: int = CELL_WIDTH) -> str:
    if len(text) > width:
        return text[:width - 1] + "~"
    return text.ljust(width)


def _day_number(cell: DayCell) -> str:
    text = f"{cell.day.day:>2}"
    if cell.is_today:
        return f"[{text}]"
    if not cell.in_period:
        return f"({text})"
    return f" {text} "


def _grid_entry(event: ValidatedEvent) -> str:
    """Carrier plus the tail of the tracking number, as in a month cell."""
    e = event.event
    if e.tracking_number:
        return f"{e.carrier} #{e.short_tracking}"
    return f"{e.carrier} {e.title}"


def _render_month(view: CalendarView, config: Config) -> list[str]:
    limit = config.layout.max_events_per_cell
    lines = [" ".join(_fit(name) for name in week_header(config.week_start, config.localization))]

    for week in view.weeks():
        lines.append(" ".join(_fit(_day_number(cell)) for cell in week))
        shown_per_cell = []
        for cell in week:
            shown, hidden = cell.visible_events(limit)
            rows = [_grid_entry(e) for e in shown]
            if hidden:
                rows.append(config.labels.more_events.format(hidden))
            shown_per_cell.append(rows)
        depth = max((len(rows) for rows in shown_per_cell), default=0)
        for i in range(depth):
            lines.append(" ".join(
                _fit(rows[i] if i < len(rows) else "") for rows in shown_per_cell))
        lines.append("")
    return lines


def _hour_label(hour: int) -> str:
    if hour == 0:
        return "12 AM"
    if hour < 12:
        return f"{hour} AM"
    if hour == 12:
        return "12 PM"
    return f"{hour - 12} PM"


def _render_hours(view: CalendarView, config: Config) -> list[str]:
    """Week and day views: an all-day row, then one row per hour, one column per day."""
    loc = config.localization
    width = CELL_WIDTH if view.granularity == Granularity.WEEK else CELL_WIDTH * 3
    header = [_fit("", LABEL_WIDTH)]
    for cell in view.cells:
        name = f"{loc.get_day_abbr(cell.day.weekday())} {cell.day.day}"
        if cell.is_today:
            name = f"[{name}]"
        header.append(_fit(name, width))
    lines = [" ".join(header)]

    all_day = [[v for v in cell.events if v.all_day] for cell in view.cells]
    if any(all_day):
        lines.extend(_slot_rows(config.labels.all_day, all_day, view.granularity, width))

    for hour in range(config.layout.hour_start, config.layout.hour_end + 1):
        columns = [[v for v in cell.events_at(hour) if not v.all_day] for cell in view.cells]
        lines.extend(_slot_rows(_hour_label(hour), columns, view.granularity, width))
    return lines


def _slot_rows(label: str, columns: list[list[ValidatedEvent]], granularity: Granularity, width: int) -> list[str]:
    lines = []
    depth = max(1, max(len(events) for events in columns))
    for i in range(depth):
        row = [_fit(label if i == 0 else "", LABEL_WIDTH)]
        for events in columns:
            if i < len(events):
                e = events[i].event
                text = e.title if granularity == Granularity.WEEK else f"{e.tracking_number} {e.title}"
                row.append(_fit(text, width))
            else:
                row.append(_fit("", width))
        lines.append(" ".join(row).rstrip())
    return lines


def _render_agenda(view: CalendarView, config: Config, today: date) -> list[str]:
    lines = []
    for agenda_day in view.agenda:
        lines.append(day_heading(agenda_day.day, today, config.labels.today, config.localization))
        for validated in agenda_day.events:
            e = validated.event
            if validated.all_day:
                time_text = config.labels.all_day
            else:
                time_text = validated.instant.strftime("%I:%M %p").lstrip("0")
            parts = [f"  {time_text:>8}", e.title]
            if e.tracking_number:
                parts.append(f"#{e.tracking_number}")
            if e.status:
                parts.append(f"[{e.status_label}]")
            if e.account_name is not None:
                parts.append(f"({e.account_name})")
            lines.append("  ".join(parts))
        lines.append("")
    return lines
