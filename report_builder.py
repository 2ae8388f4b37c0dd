"""Statistics and validation reports derived from a finished schedule."""
from collections import Counter

from data_models import ScheduleStatistics
from occupancy_index import TEACHER, ROOM, BATCH


class ReportBuilder:
    """Derives utilization counts and summaries from the engine's final state."""

    def __init__(self, timetable, occupancy, teachers, rooms, batches=None):
        self.timetable = timetable
        self.occupancy = occupancy
        self.teachers = teachers
        self.rooms = rooms
        self.batches = batches or []

    def _slots(self):
        for department_data in self.timetable.values():
            for day_data in department_data.values():
                for cell in day_data.values():
                    yield from cell

    def _resource_counts(self):
        """Count index entries per (kind, resource)."""
        counts = Counter()
        for (_, _, kind, resource), _slot in self.occupancy.items():
            counts[(kind, resource)] += 1
        return counts

    def calculate_statistics(self):
        """Grid slot counts plus per-teacher, per-room and per-batch occupancy."""
        statistics = ScheduleStatistics()
        for slot in self._slots():
            statistics.total_slots += 1
            if slot.is_fixed:
                statistics.fixed_slots += 1
            else:
                statistics.generated_slots += 1

        counts = self._resource_counts()
        for teacher in self.teachers:
            statistics.teacher_utilization[teacher.name] = counts[(TEACHER, teacher.name)]
        for room in self.rooms:
            statistics.room_utilization[room] = counts[(ROOM, room)]
        for batch in self.batches:
            statistics.batch_utilization[batch] = counts[(BATCH, batch)]
        return statistics

    def department_summary(self):
        """Rows of total/fixed/generated slot counts per department."""
        rows = []
        for department, department_data in self.timetable.items():
            total = fixed = 0
            for day_data in department_data.values():
                for cell in day_data.values():
                    total += len(cell)
                    fixed += sum(1 for slot in cell if slot.is_fixed)
            rows.append({
                'department': department,
                'total': total,
                'fixed': fixed,
                'generated': total - fixed
            })
        return rows

    def find_double_bookings(self):
        """Scan every booking and return resources held by more than one slot at once.

        Each entry carries how many of the colliding bookings were generated, so a
        caller can check that the greedy search never introduced a collision.
        """
        double_bookings = []
        for (day, time, kind, resource), slots in self.occupancy.bookings():
            if len(slots) > 1:
                double_bookings.append({
                    'day': day,
                    'time': time,
                    'kind': kind,
                    'resource': resource,
                    'entries': [(slot.department, slot.subject, slot.batch) for slot in slots],
                    'generated': sum(1 for slot in slots if not slot.is_fixed)
                })
        return double_bookings

    @staticmethod
    def requirement_summary(requirements, scheduled_hours):
        """Scheduled vs required hours for each (requirement, batch) pair."""
        rows = []
        for requirement in requirements:
            for batch in requirement.batches:
                rows.append({
                    'subject': requirement.subject,
                    'department': requirement.department,
                    'batch': batch,
                    'scheduled': scheduled_hours.get((requirement.subject, batch), 0),
                    'required': requirement.hours_per_week
                })
        return rows
