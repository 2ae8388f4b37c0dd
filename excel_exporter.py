"""Excel export utilities."""
import os
import re
import time
import pandas as pd
from openpyxl.styles import PatternFill, Font, Alignment
from file_manager import FileManager
from config import DAYS, TIME_SLOTS, TIMETABLE_FILENAME, TEACHERS_EXPORT_FILENAME, REPORT_SHEETS
from report_builder import ReportBuilder


class ExcelExporter:
    """Handles exporting of a GenerationResult to an Excel workbook."""

    def __init__(self, result, schedule_generator=None):
        self.result = result
        self.schedule_gen = schedule_generator
        # Vibrant pastel palette (readable on black text)
        self._palette = [
            "FFCDD2","F8BBD0","E1BEE7","D1C4E9","C5CAE9","BBDEFB","B3E5FC","B2EBF2",
            "B2DFDB","C8E6C9","DCEDC8","F0F4C3","FFF9C4","FFECB3","FFE0B2","FFCCBC",
            "D7CCC8","CFD8DC"
        ]
        # Deterministic color mapping per exported workbook
        self._course_color_map = {}

    def _color_for_course(self, course):
        """Pick a stable color for the course within the current export."""
        if not course:
            return None
        if course not in self._course_color_map:
            idx = len(self._course_color_map) % len(self._palette)
            self._course_color_map[course] = self._palette[idx]
        return self._course_color_map[course]

    def _apply_color_coding(self, worksheet, department, start_row=1, start_col=1):
        """Color timetable cells by the subject of their first slot; cells holding a fixed slot in bold."""
        # Frame written with one header row and one index column
        for r, time_label in enumerate(TIME_SLOTS):
            for c, day in enumerate(DAYS):
                slots = self.result.get_cell(department, day, time_label)
                if not slots:
                    continue
                cell = worksheet.cell(row=start_row + 1 + r, column=start_col + 1 + c)
                cell.fill = PatternFill(fill_type="solid", fgColor=self._color_for_course(slots[0].subject))
                if any(slot.is_fixed for slot in slots):
                    cell.font = Font(bold=True)
                if len(slots) > 1:
                    cell.alignment = Alignment(wrap_text=True, vertical="top")

    @staticmethod
    def _sheet_name(department, used):
        """Excel-safe sheet name (max 31 chars, no []:*?/\\), unique ignoring case.

        used holds lower-cased names already taken in the workbook.
        """
        base = re.sub(r"[\[\]:*?/\\]", "-", str(department)).strip() or "Department"
        name = base[:31]
        n = 2
        while name.lower() in used:
            suffix = f"_{n}"
            name = base[:31 - len(suffix)] + suffix
            n += 1
        used.add(name.lower())
        return name

    def department_frame(self, department):
        """Time slots as rows and days as columns, '-' for free cells.

        A cell shared by several batches lists one slot per line.
        """
        frame = pd.DataFrame(index=TIME_SLOTS, columns=DAYS)
        frame.index.name = 'Time'
        for time_label in TIME_SLOTS:
            for day in DAYS:
                slots = self.result.get_cell(department, day, time_label)
                frame.loc[time_label, day] = "\n".join(slot.describe() for slot in slots) if slots else '-'
        return frame

    def _open_writer(self, filepath):
        """Open an ExcelWriter, falling back to a timestamped name if the file is locked."""
        try:
            return pd.ExcelWriter(filepath, engine='openpyxl'), filepath
        except PermissionError:
            print(f"\nWARNING: Cannot write to {filepath} (Permission denied / file may be open).")
            root, ext = os.path.splitext(filepath)
            alt_filepath = f"{root}_{int(time.time())}{ext or '.xlsx'}"
            print(f"Attempting alternative filename: {alt_filepath}")
            return pd.ExcelWriter(alt_filepath, engine='openpyxl'), alt_filepath

    def export_timetable(self, filepath=None):
        """Export every department timetable plus summary sheets. Returns the written path or None."""
        self._course_color_map = {}
        filepath = filepath or FileManager.get_output_path(TIMETABLE_FILENAME)

        try:
            writer, filepath = self._open_writer(filepath)
        except Exception as e:
            print(f"\nFAILED: Could not create {filepath}: {e}")
            import traceback
            traceback.print_exc()
            return None

        try:
            with writer as w:
                print(f"Creating {filepath}...")
                used_names = {name.lower() for name in REPORT_SHEETS}
                for department in self.result.departments:
                    sheet_name = self._sheet_name(department, used_names)
                    frame = self.department_frame(department)
                    frame.to_excel(w, sheet_name=sheet_name, index=True, startrow=0)
                    self._apply_color_coding(w.sheets[sheet_name], department, start_row=1, start_col=1)
                    print(f"    SUCCESS: {sheet_name} created")

                self._add_summary(w)
                if self.schedule_gen is not None:
                    self._add_requirements(w)
                self._add_conflicts(w)
                self._add_utilization(w)

            print(f"\nSUCCESS: Created {filepath}")
            print(f"  - {len(self.result.departments)} department timetables")
            return filepath
        except Exception as e:
            print(f"\nFAILED: Could not create {filepath}: {e}")
            import traceback
            traceback.print_exc()
            return None

    def _add_summary(self, writer):
        """Total, fixed and generated classes per department."""
        rows = ReportBuilder(self.result.timetable, None, [], []).department_summary()
        summary_df = pd.DataFrame(
            [[row['department'], row['total'], row['fixed'], row['generated']] for row in rows],
            columns=['Department', 'Total Classes', 'Fixed Classes', 'Generated Classes']
        )
        summary_df.to_excel(writer, sheet_name='Summary', index=False)

    def _add_requirements(self, writer):
        """Hours per (subject, batch) formatted as 'scheduled/required'."""
        rows = self.schedule_gen.requirement_summary()
        requirements_df = pd.DataFrame(
            [[row['subject'], row['department'], row['batch'], f"{row['scheduled']}/{row['required']}"]
             for row in rows],
            columns=['Subject', 'Department', 'Batch', 'Hours Scheduled']
        )
        requirements_df.to_excel(writer, sheet_name='Requirements', index=False)

    def _add_conflicts(self, writer):
        conflicts = self.result.conflicts or ['No conflicts detected.']
        pd.DataFrame({'Conflict': conflicts}).to_excel(writer, sheet_name='Conflicts', index=False)

    def _add_utilization(self, writer):
        """Occupied slot counts for every teacher, room and batch."""
        stats = self.result.statistics
        rows = [['Teacher', name, count] for name, count in stats.teacher_utilization.items()]
        rows += [['Room', name, count] for name, count in stats.room_utilization.items()]
        rows += [['Batch', name, count] for name, count in stats.batch_utilization.items()]
        pd.DataFrame(rows, columns=['Type', 'Name', 'Slots']).to_excel(writer, sheet_name='Utilization', index=False)

    @staticmethod
    def export_teachers(teachers, filepath=None):
        """Write the teacher list to a single-sheet workbook."""
        filepath = filepath or FileManager.get_output_path(TEACHERS_EXPORT_FILENAME)
        rows = []
        for teacher in teachers:
            row = {
                'ID': teacher.id,
                'Name': teacher.name,
                'Email': teacher.email,
                'Subjects': ', '.join(teacher.subjects),
                'MaxHours': teacher.max_hours_per_week
            }
            for day in DAYS:
                row[f"{day}_Availability"] = ', '.join(teacher.availability.get(day, []))
            rows.append(row)
        pd.DataFrame(rows).to_excel(filepath, sheet_name='Teachers', index=False, engine='openpyxl')
        print(f"SUCCESS: Exported {len(rows)} teachers to {filepath}")
        return filepath
