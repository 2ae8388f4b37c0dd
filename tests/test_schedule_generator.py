import json

import pytest

from config import DAYS, TIME_SLOTS
from conftest import make_teacher, make_fixed, make_requirement
from schedule_generator import ScheduleGenerator


def test_single_hour_lands_in_first_available_slot(smith_monday_nine):
    requirement = make_requirement('Data Structures', 1, ['CSE-A'])
    result = ScheduleGenerator([smith_monday_nine], [], [requirement]).generate()

    assert result.conflicts == []
    assert result.statistics.generated_slots == 1
    slot = result.get_slot('Computer Science', 'Monday', '9:00-10:00')
    assert slot.subject == 'Data Structures'
    assert slot.teacher == 'Dr. Smith'
    assert slot.room == 'CS-101'
    assert slot.batch == 'CSE-A'
    assert slot.is_fixed is False


def test_unmet_hours_are_reported_once_with_remaining_count(smith_monday_nine):
    requirement = make_requirement('Data Structures', 2, ['CSE-A'])
    generator = ScheduleGenerator([smith_monday_nine], [], [requirement])
    result = generator.generate()

    assert result.statistics.generated_slots == 1
    assert result.conflicts == ['Could not schedule Data Structures for CSE-A (1 hour(s) remaining)']
    assert generator.get_scheduled_hours('Data Structures', 'CSE-A') == 1


def test_fixed_room_collision_reports_room_only_and_keeps_later_slot():
    fixed_slots = [
        make_fixed('Algorithms', 'Dr. Smith', 'Monday', '9:00-10:00', 'CS-101', 'CSE-A'),
        make_fixed('Physics', 'Dr. Brown', 'Monday', '9:00-10:00', 'CS-101', 'CSE-B'),
    ]
    result = ScheduleGenerator([], fixed_slots, []).generate()

    assert result.conflicts == ['Room conflict: CS-101 at Monday 9:00-10:00']
    assert len(result.get_cell('Computer Science', 'Monday', '9:00-10:00')) == 1
    cell = result.get_slot('Computer Science', 'Monday', '9:00-10:00')
    assert cell.subject == 'Physics'
    assert cell.teacher == 'Dr. Brown'
    assert cell.is_fixed is True


def test_fixed_teacher_and_batch_collisions_are_reported_in_key_order():
    fixed_slots = [
        make_fixed('Algorithms', 'Dr. Smith', 'Monday', '9:00-10:00', 'CS-101', 'CSE-A'),
        make_fixed('Algorithms Lab', 'Dr. Smith', 'Monday', '9:00-10:00', 'CS-102', 'CSE-A',
                   department='Information Technology'),
    ]
    result = ScheduleGenerator([], fixed_slots, []).generate()

    assert result.conflicts == [
        'Teacher conflict: Dr. Smith at Monday 9:00-10:00',
        'Batch conflict: CSE-A at Monday 9:00-10:00',
    ]
    # Different departments, so both cells survive
    assert result.statistics.fixed_slots == 2


def test_fixed_slots_are_placed_unchanged(department_inputs):
    teachers, fixed_slots, requirements = department_inputs
    result = ScheduleGenerator(teachers, fixed_slots, requirements).generate()

    for fixed in fixed_slots:
        cell = result.get_slot(fixed.department, fixed.day, fixed.time)
        assert cell.is_fixed is True
        assert (cell.subject, cell.teacher, cell.room, cell.batch) == \
            (fixed.subject, fixed.faculty, fixed.room, fixed.batch)


def test_generation_is_deterministic(department_inputs):
    teachers, fixed_slots, requirements = department_inputs
    generator = ScheduleGenerator(teachers, fixed_slots, requirements)
    first = generator.generate()
    second = generator.generate()
    third = ScheduleGenerator(teachers, fixed_slots, requirements).generate()

    assert first == second == third
    assert json.dumps(first.to_dict()) == json.dumps(third.to_dict())


def test_generated_slots_never_double_book(department_inputs):
    teachers, fixed_slots, requirements = department_inputs
    # A colliding fixed pair that must stay visible but not attract generated slots
    fixed_slots = fixed_slots + [
        make_fixed('Networks', 'Dr. Lee', 'Monday', '9:00-10:00', 'CS-101', 'CSE-C', department='Electronics'),
    ]
    generator = ScheduleGenerator(teachers, fixed_slots, requirements)
    result = generator.generate()

    double_bookings = generator.validate_double_bookings()
    assert [booking['kind'] for booking in double_bookings] == ['room']
    assert all(booking['generated'] == 0 for booking in double_bookings)

    seen = set()
    for slot in result.iter_slots():
        for key in [('room', slot.room), ('teacher', slot.teacher), ('batch', slot.batch)]:
            full_key = (slot.day, slot.time) + key
            if not slot.is_fixed:
                assert full_key not in seen
            seen.add(full_key)


def test_quota_met_when_resources_are_ample(department_inputs):
    teachers, fixed_slots, requirements = department_inputs
    generator = ScheduleGenerator(teachers, fixed_slots, requirements)
    result = generator.generate()

    assert result.conflicts == []
    for requirement in requirements:
        for batch in requirement.batches:
            placed = [slot for slot in result.iter_slots()
                      if not slot.is_fixed and slot.subject == requirement.subject and slot.batch == batch]
            assert len(placed) == requirement.hours_per_week
            assert generator.get_scheduled_hours(requirement.subject, batch) == requirement.hours_per_week


def test_subject_without_qualified_teacher_reports_all_hours():
    teachers = [make_teacher('Dr. Smith', ['Algorithms'])]
    requirement = make_requirement('Compilers', 3, ['CSE-A', 'CSE-B'])
    result = ScheduleGenerator(teachers, [], [requirement]).generate()

    assert result.statistics.generated_slots == 0
    assert result.conflicts == [
        'Could not schedule Compilers for CSE-A (3 hour(s) remaining)',
        'Could not schedule Compilers for CSE-B (3 hour(s) remaining)',
    ]


def test_batches_of_one_department_share_an_hour():
    teachers = [
        make_teacher('Dr. Smith', ['Data Structures'], availability={'Monday': ['9:00-10:00']}),
        make_teacher('Dr. Lee', ['Data Structures'], availability={'Monday': ['9:00-10:00']}),
    ]
    requirement = make_requirement('Data Structures', 1, ['CSE-A', 'CSE-B'])
    generator = ScheduleGenerator(teachers, [], [requirement])
    result = generator.generate()

    assert result.conflicts == []
    assert result.statistics.generated_slots == 2
    cell = result.get_cell('Computer Science', 'Monday', '9:00-10:00')
    assert [(slot.batch, slot.teacher, slot.room) for slot in cell] == [
        ('CSE-A', 'Dr. Smith', 'CS-101'),
        ('CSE-B', 'Dr. Lee', 'CS-102'),
    ]
    assert result.get_slot('Computer Science', 'Monday', '9:00-10:00', batch='CSE-B').teacher == 'Dr. Lee'
    assert generator.validate_double_bookings() == []


def test_two_batches_meet_a_sixteen_hour_quota():
    teachers = [make_teacher(f"Teacher {n}", ['Data Structures']) for n in range(1, 5)]
    requirement = make_requirement('Data Structures', 16, ['CSE-A', 'CSE-B'])
    generator = ScheduleGenerator(teachers, [], [requirement])
    result = generator.generate()

    assert result.conflicts == []
    assert result.statistics.generated_slots == 32
    assert generator.get_scheduled_hours('Data Structures', 'CSE-A') == 16
    assert generator.get_scheduled_hours('Data Structures', 'CSE-B') == 16
    assert generator.validate_double_bookings() == []
    assert len(result.get_cell('Computer Science', 'Monday', '9:00-10:00')) == 2


def test_generated_slot_joins_a_fixed_slot_in_the_same_hour():
    teacher = make_teacher('Dr. Smith', ['Data Structures'],
                           availability={'Monday': ['9:00-10:00', '10:00-11:00']})
    fixed = make_fixed('Algorithms', 'Prof. X', 'Monday', '9:00-10:00', 'CS-101', 'CSE-B')
    requirement = make_requirement('Data Structures', 1, ['CSE-A'])
    result = ScheduleGenerator([teacher], [fixed], [requirement]).generate()

    assert result.conflicts == []
    cell = result.get_cell('Computer Science', 'Monday', '9:00-10:00')
    assert [(slot.subject, slot.is_fixed) for slot in cell] == [('Algorithms', True), ('Data Structures', False)]
    assert cell[1].room == 'CS-102'
    assert result.get_cell('Computer Science', 'Monday', '10:00-11:00') == []


def test_fixed_slots_without_shared_resources_share_a_cell():
    fixed_slots = [
        make_fixed('Algorithms', 'Dr. Smith', 'Monday', '9:00-10:00', 'CS-101', 'CSE-A'),
        make_fixed('Physics', 'Dr. Brown', 'Monday', '9:00-10:00', 'CS-102', 'CSE-B'),
    ]
    result = ScheduleGenerator([], fixed_slots, []).generate()

    assert result.conflicts == []
    assert result.statistics.fixed_slots == 2
    assert [slot.subject for slot in result.get_cell('Computer Science', 'Monday', '9:00-10:00')] == \
        ['Algorithms', 'Physics']


def test_teacher_booked_by_fixed_slot_is_not_reused():
    teacher = make_teacher('Dr. Smith', ['Data Structures'],
                           availability={'Monday': ['9:00-10:00', '11:00-12:00']})
    fixed = make_fixed('Seminar', 'Dr. Smith', 'Monday', '9:00-10:00', 'M-201', 'MBA-1', department='Management')
    requirement = make_requirement('Data Structures', 1, ['CSE-A'])
    result = ScheduleGenerator([teacher], [fixed], [requirement]).generate()

    slot = result.get_slot('Computer Science', 'Monday', '11:00-12:00')
    assert slot is not None and slot.teacher == 'Dr. Smith'
    assert result.get_slot('Computer Science', 'Monday', '9:00-10:00') is None


def test_days_are_searched_before_time_slots():
    teacher = make_teacher('Dr. Smith', ['Data Structures'],
                           availability={'Tuesday': ['9:00-10:00'], 'Monday': ['3:00-4:00']})
    result = ScheduleGenerator([teacher], [], [make_requirement('Data Structures', 1, ['CSE-A'])]).generate()

    assert result.get_slot('Computer Science', 'Monday', '3:00-4:00') is not None
    assert result.get_slot('Computer Science', 'Tuesday', '9:00-10:00') is None


def test_candidate_teachers_tried_in_input_order():
    teachers = [
        make_teacher('Dr. Busy', ['Data Structures'], availability={}),
        make_teacher('Dr. Smith', ['Data Structures']),
        make_teacher('Dr. Lee', ['Data Structures']),
    ]
    result = ScheduleGenerator(teachers, [], [make_requirement('Data Structures', 1, ['CSE-A'])]).generate()
    assert result.get_slot('Computer Science', 'Monday', '9:00-10:00').teacher == 'Dr. Smith'


def test_room_list_puts_fixed_rooms_before_pool():
    fixed = make_fixed('Lab', 'Dr. Smith', 'Friday', '3:00-4:00', 'LAB-1', 'CSE-A')
    assert ScheduleGenerator([], [fixed], [], rooms=['R1', 'LAB-1']).rooms == ['LAB-1', 'R1']
    default_rooms = ScheduleGenerator([], [fixed], []).rooms
    assert default_rooms[0] == 'LAB-1'
    assert len(default_rooms) == 10


def test_no_free_room_blocks_placement():
    teacher = make_teacher('Dr. Smith', ['Data Structures'], availability={'Monday': ['9:00-10:00']})
    fixed = make_fixed('Seminar', 'Prof. X', 'Monday', '9:00-10:00', 'R1', 'MBA-1', department='Management')
    result = ScheduleGenerator([teacher], [fixed], [make_requirement('Data Structures', 1, ['CSE-A'])],
                               rooms=[]).generate()

    assert result.statistics.generated_slots == 0
    assert result.conflicts == ['Could not schedule Data Structures for CSE-A (1 hour(s) remaining)']


def test_max_hours_only_enforced_when_enabled():
    teacher = make_teacher('Dr. Smith', ['Data Structures'], max_hours=2)
    requirement = make_requirement('Data Structures', 3, ['CSE-A'])

    relaxed = ScheduleGenerator([teacher], [], [requirement]).generate()
    assert relaxed.statistics.generated_slots == 3

    capped = ScheduleGenerator([teacher], [], [requirement], enforce_max_hours=True).generate()
    assert capped.statistics.generated_slots == 2
    assert capped.conflicts == ['Could not schedule Data Structures for CSE-A (1 hour(s) remaining)']


def test_zero_hour_requirement_places_nothing():
    teacher = make_teacher('Dr. Smith', ['Data Structures'])
    result = ScheduleGenerator([teacher], [], [make_requirement('Data Structures', 0, ['CSE-A'])]).generate()
    assert result.statistics.total_slots == 0
    assert result.conflicts == []
    assert result.departments == ['Computer Science']


def test_grid_has_every_department_and_day():
    fixed = make_fixed('Lab', 'Dr. Smith', 'Friday', '3:00-4:00', 'LAB-1', 'CSE-A', department='Electronics')
    result = ScheduleGenerator([], [fixed], [make_requirement('Maths', 0, ['CSE-A'])]).generate()

    assert result.departments == ['Electronics', 'Computer Science']
    for department in result.departments:
        assert list(result.timetable[department].keys()) == DAYS


def test_statistics_count_grid_and_index(smith_monday_nine):
    fixed = make_fixed('Seminar', 'Prof. X', 'Friday', '3:00-4:00', 'CS-101', 'CSE-A')
    requirement = make_requirement('Data Structures', 1, ['CSE-A'])
    result = ScheduleGenerator([smith_monday_nine], [fixed], [requirement]).generate()
    stats = result.statistics

    assert (stats.total_slots, stats.fixed_slots, stats.generated_slots) == (2, 1, 1)
    # Only input teachers are reported
    assert stats.teacher_utilization == {'Dr. Smith': 1}
    assert stats.room_utilization['CS-101'] == 2
    assert stats.room_utilization['CS-102'] == 0
    assert stats.batch_utilization == {'CSE-A': 2}


def test_requirement_summary_rows(smith_monday_nine):
    generator = ScheduleGenerator([smith_monday_nine], [], [make_requirement('Data Structures', 2, ['CSE-A'])])
    generator.generate()
    assert generator.requirement_summary() == [{
        'subject': 'Data Structures',
        'department': 'Computer Science',
        'batch': 'CSE-A',
        'scheduled': 1,
        'required': 2,
    }]


@pytest.mark.parametrize('missing', ['teachers', 'fixed_slots', 'subject_requirements'])
def test_missing_constructor_argument_raises(missing):
    kwargs = {'teachers': [], 'fixed_slots': [], 'subject_requirements': []}
    kwargs[missing] = None
    with pytest.raises(ValueError):
        ScheduleGenerator(**kwargs)


def test_report_builder_requires_a_run():
    with pytest.raises(RuntimeError):
        ScheduleGenerator([], [], []).report_builder()


def test_full_week_fills_in_canonical_order():
    teacher = make_teacher('Dr. Smith', ['Data Structures'])
    hours = len(DAYS) * len(TIME_SLOTS)
    result = ScheduleGenerator([teacher], [], [make_requirement('Data Structures', hours + 1, ['CSE-A'])]).generate()

    assert result.statistics.generated_slots == hours
    assert result.conflicts == ['Could not schedule Data Structures for CSE-A (1 hour(s) remaining)']
    assert list(result.timetable['Computer Science']['Monday'].keys()) == TIME_SLOTS
