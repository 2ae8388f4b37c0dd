import pytest

from config import DAYS, TIME_SLOTS
from data_models import Teacher, FixedSlot, SubjectRequirement


def make_teacher(name, subjects, availability=None, max_hours=20, teacher_id=None):
    """Teacher available at every slot of every day unless availability is given."""
    if availability is None:
        availability = {day: list(TIME_SLOTS) for day in DAYS}
    return Teacher(
        id=teacher_id or name.lower().replace(' ', '-'),
        name=name,
        subjects=list(subjects),
        availability=availability,
        max_hours_per_week=max_hours,
    )


def make_fixed(subject, faculty, day, time, room, batch, department='Computer Science'):
    return FixedSlot(department=department, subject=subject, faculty=faculty,
                     day=day, time=time, room=room, batch=batch)


def make_requirement(subject, hours, batches, department='Computer Science', required_teachers=1):
    return SubjectRequirement(subject=subject, department=department, hours_per_week=hours,
                              batches=list(batches), required_teachers=required_teachers)


@pytest.fixture
def smith_monday_nine():
    return make_teacher('Dr. Smith', ['Data Structures'], availability={'Monday': ['9:00-10:00']})


@pytest.fixture
def department_inputs():
    """A small department with enough teachers and rooms for every requirement."""
    teachers = [
        make_teacher('Dr. Smith', ['Data Structures', 'Algorithms']),
        make_teacher('Prof. Johnson', ['Database Systems']),
        make_teacher('Dr. Lee', ['Data Structures', 'Database Systems']),
    ]
    fixed_slots = [
        make_fixed('Algorithms', 'Dr. Smith', 'Monday', '9:00-10:00', 'CS-101', 'CSE-A'),
        make_fixed('Database Systems', 'Prof. Johnson', 'Tuesday', '10:00-11:00', 'CS-102', 'CSE-B',
                   department='Information Technology'),
    ]
    requirements = [
        make_requirement('Data Structures', 4, ['CSE-A', 'CSE-B']),
        make_requirement('Database Systems', 3, ['IT-A', 'IT-B'], department='Information Technology'),
    ]
    return teachers, fixed_slots, requirements
