"""Printable HTML rendering of a generated timetable."""
from html import escape

from config import DAYS, TIME_SLOTS

STYLE = """
body { font-family: Arial, sans-serif; margin: 20px; }
table { border-collapse: collapse; width: 100%; margin-bottom: 30px; }
th, td { border: 1px solid #ddd; padding: 8px; text-align: center; }
th { background-color: #f2f2f2; font-weight: bold; }
.fixed { background-color: #e3f2fd; padding: 4px; }
.generated { background-color: #f3e5f5; padding: 4px; }
td > div + div { margin-top: 4px; }
.department-title { margin-top: 30px; font-size: 18px; font-weight: bold; }
.conflicts li { color: #b71c1c; }
@media print {
  .department { page-break-inside: avoid; }
}
"""


def _slot_block(slot):
    css_class = "fixed" if slot.is_fixed else "generated"
    lines = [
        f"<div><strong>{escape(slot.subject)}</strong></div>",
        f"<div>{escape(slot.teacher)}</div>",
        f"<div>{escape(slot.room)} - {escape(slot.batch)}</div>",
    ]
    if slot.is_fixed:
        lines.append("<div><em>[FIXED]</em></div>")
    return f'<div class="{css_class}">' + "".join(lines) + "</div>"


def _slot_cell(slots):
    """A table cell holding every slot of one department hour, one block per batch."""
    return "<td>" + "".join(_slot_block(slot) for slot in slots) + "</td>"


def render_department(department, department_data):
    """One table with time slots as rows and days as columns."""
    rows = []
    header = "".join(f"<th>{escape(day)}</th>" for day in DAYS)
    rows.append(f"<thead><tr><th>Time</th>{header}</tr></thead>")
    rows.append("<tbody>")
    for time_label in TIME_SLOTS:
        cells = "".join(_slot_cell(department_data.get(day, {}).get(time_label, [])) for day in DAYS)
        rows.append(f"<tr><td><strong>{escape(time_label)}</strong></td>{cells}</tr>")
    rows.append("</tbody>")
    return (
        '<div class="department">'
        f'<h2 class="department-title">{escape(department)} Department</h2>'
        f"<table>{''.join(rows)}</table>"
        "</div>"
    )


def generate_html(result, path=None, title="College Timetable", include_conflicts=True):
    """Render every department of a GenerationResult; write it to path when given."""
    parts = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{escape(title)}</title>",
        f"<style>{STYLE}</style>",
        "</head>",
        "<body>",
        f"<h1>{escape(title)}</h1>",
    ]
    for department, department_data in result.timetable.items():
        parts.append(render_department(department, department_data))

    if include_conflicts and result.conflicts:
        items = "".join(f"<li>{escape(conflict)}</li>" for conflict in result.conflicts)
        parts.append(f'<h2>Conflicts ({len(result.conflicts)})</h2><ul class="conflicts">{items}</ul>')

    parts += ["</body>", "</html>"]
    html = "\n".join(parts)

    if path:
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(html)
        print(f"SUCCESS: Wrote printable timetable to {path}")
    return html
