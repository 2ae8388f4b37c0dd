"""Typed records exchanged between ingestion, the schedule engine and the exporters."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Teacher:
    id: str
    name: str
    subjects: List[str]
    availability: Dict[str, List[str]]  # day -> time-slot labels the teacher can take
    max_hours_per_week: int = 20
    email: str = ''

    def can_teach(self, subject):
        return subject in self.subjects

    def is_available(self, day, time):
        return time in self.availability.get(day, [])

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'subjects': list(self.subjects),
            'availability': {day: list(times) for day, times in self.availability.items()},
            'maxHoursPerWeek': self.max_hours_per_week,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data['id'],
            name=data['name'],
            subjects=list(data.get('subjects', [])),
            availability={day: list(times) for day, times in data.get('availability', {}).items()},
            max_hours_per_week=int(data.get('maxHoursPerWeek', 20)),
            email=data.get('email', ''),
        )


@dataclass(frozen=True)
class FixedSlot:
    """An immovable class placement supplied by the user."""
    department: str
    subject: str
    faculty: str
    day: str
    time: str
    room: str
    batch: str

    def to_dict(self):
        return {
            'department': self.department,
            'subject': self.subject,
            'faculty': self.faculty,
            'day': self.day,
            'time': self.time,
            'room': self.room,
            'batch': self.batch,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            department=data['department'],
            subject=data['subject'],
            faculty=data['faculty'],
            day=data['day'],
            time=data['time'],
            room=data['room'],
            batch=data['batch'],
        )


@dataclass(frozen=True)
class SubjectRequirement:
    """Weekly hours a subject needs for each of its batches."""
    subject: str
    department: str
    hours_per_week: int
    batches: List[str]
    # Carried through from the upload; placement assigns one teacher per slot.
    required_teachers: int = 1

    def to_dict(self):
        return {
            'subject': self.subject,
            'department': self.department,
            'hoursPerWeek': self.hours_per_week,
            'batches': list(self.batches),
            'requiredTeachers': self.required_teachers,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            subject=data['subject'],
            department=data['department'],
            hours_per_week=int(data['hoursPerWeek']),
            batches=list(data.get('batches', [])),
            required_teachers=int(data.get('requiredTeachers', 1)),
        )


@dataclass(frozen=True)
class ClassGroup:
    id: str
    name: str
    department: str
    strength: int = 0
    subjects: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'department': self.department,
            'strength': self.strength,
            'subjects': list(self.subjects),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data['id'],
            name=data['name'],
            department=data['department'],
            strength=int(data.get('strength', 0)),
            subjects=list(data.get('subjects', [])),
        )


@dataclass(frozen=True)
class PlacedSlot:
    """A slot committed to the grid, fixed or generated."""
    department: str
    day: str
    time: str
    subject: str
    teacher: str
    room: str
    batch: str
    is_fixed: bool

    def to_cell(self):
        return {
            'subject': self.subject,
            'teacher': self.teacher,
            'room': self.room,
            'batch': self.batch,
            'isFixed': self.is_fixed,
        }

    def describe(self):
        """Cell text used by the spreadsheet export."""
        text = f"{self.subject} - {self.teacher} ({self.room}) [{self.batch}]"
        if self.is_fixed:
            text += ' [FIXED]'
        return text


@dataclass
class ScheduleStatistics:
    total_slots: int = 0
    fixed_slots: int = 0
    generated_slots: int = 0
    teacher_utilization: Dict[str, int] = field(default_factory=dict)
    room_utilization: Dict[str, int] = field(default_factory=dict)
    batch_utilization: Dict[str, int] = field(default_factory=dict)

    def to_dict(self):
        return {
            'totalSlots': self.total_slots,
            'fixedSlots': self.fixed_slots,
            'generatedSlots': self.generated_slots,
            'teacherUtilization': dict(self.teacher_utilization),
            'roomUtilization': dict(self.room_utilization),
            'batchUtilization': dict(self.batch_utilization),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            total_slots=data.get('totalSlots', 0),
            fixed_slots=data.get('fixedSlots', 0),
            generated_slots=data.get('generatedSlots', 0),
            teacher_utilization=dict(data.get('teacherUtilization', {})),
            room_utilization=dict(data.get('roomUtilization', {})),
            batch_utilization=dict(data.get('batchUtilization', {})),
        )


@dataclass(frozen=True)
class GenerationResult:
    """Output of one ScheduleGenerator.generate() run.

    timetable maps department -> day -> time-slot label -> list of PlacedSlot.
    Slots sharing a cell never share a room, teacher or batch.
    A non-empty conflicts list is a degraded but valid result.
    """
    timetable: Dict[str, Dict[str, Dict[str, List[PlacedSlot]]]]
    conflicts: List[str]
    statistics: ScheduleStatistics

    @property
    def departments(self):
        return list(self.timetable.keys())

    def get_cell(self, department, day, time) -> List[PlacedSlot]:
        return self.timetable.get(department, {}).get(day, {}).get(time, [])

    def get_slot(self, department, day, time, batch=None) -> Optional[PlacedSlot]:
        """First slot in the cell, or the one for a given batch."""
        for slot in self.get_cell(department, day, time):
            if batch is None or slot.batch == batch:
                return slot
        return None

    def iter_slots(self):
        """Yield every placed slot in grid order."""
        for department_data in self.timetable.values():
            for day_data in department_data.values():
                for cell in day_data.values():
                    for slot in cell:
                        yield slot

    def to_dict(self):
        timetable = {}
        for department, department_data in self.timetable.items():
            timetable[department] = {}
            for day, day_data in department_data.items():
                timetable[department][day] = {time: [slot.to_cell() for slot in cell]
                                              for time, cell in day_data.items()}
        return {
            'timetable': timetable,
            'conflicts': list(self.conflicts),
            'statistics': self.statistics.to_dict(),
        }

    @classmethod
    def from_dict(cls, data):
        timetable = {}
        for department, department_data in data.get('timetable', {}).items():
            timetable[department] = {}
            for day, day_data in department_data.items():
                timetable[department][day] = {}
                for time, cell in day_data.items():
                    timetable[department][day][time] = [
                        PlacedSlot(
                            department=department,
                            day=day,
                            time=time,
                            subject=entry['subject'],
                            teacher=entry['teacher'],
                            room=entry['room'],
                            batch=entry['batch'],
                            is_fixed=bool(entry['isFixed']),
                        )
                        for entry in cell
                    ]
        return cls(
            timetable=timetable,
            conflicts=list(data.get('conflicts', [])),
            statistics=ScheduleStatistics.from_dict(data.get('statistics', {})),
        )
