"""Core scheduling logic for generating a weekly department timetable."""
from config import DAYS, TIME_SLOTS, DEFAULT_ROOMS, FALLBACK_DEPARTMENT, ENFORCE_MAX_HOURS
from data_models import PlacedSlot, GenerationResult
from occupancy_index import OccupancyIndex, TEACHER, BATCH, ROOM
from report_builder import ReportBuilder


def _unique(values):
    """Drop repeated values, keeping first occurrence order."""
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


class ScheduleGenerator:
    """Places fixed slots, then greedily fills subject hour requirements into free slots.

    Infeasible demand never raises: it is reported through the conflicts list of
    the returned GenerationResult.
    """

    def __init__(self, teachers, fixed_slots, subject_requirements, classes=None, rooms=None,
                 enforce_max_hours=None):
        """Initialize ScheduleGenerator with the uploaded records."""
        if teachers is None:
            raise ValueError("teachers must be provided (use an empty list for none)")
        if fixed_slots is None:
            raise ValueError("fixed_slots must be provided (use an empty list for none)")
        if subject_requirements is None:
            raise ValueError("subject_requirements must be provided (use an empty list for none)")

        self.teachers = list(teachers)
        self.fixed_slots = list(fixed_slots)
        self.subject_requirements = list(subject_requirements)
        self.classes = list(classes or [])
        self.days = list(DAYS)
        self.time_slots = list(TIME_SLOTS)
        self.rooms = self._extract_rooms(rooms)
        if enforce_max_hours is None:
            enforce_max_hours = ENFORCE_MAX_HOURS
        self.enforce_max_hours = enforce_max_hours

        # State of the last generate() run
        self.timetable = None
        self.occupancy = None
        self.scheduled_hours = {}  # key=(subject, batch) -> hours placed
        self.teacher_hours = {}  # key=teacher name -> hours booked (fixed + generated)

    def _extract_rooms(self, rooms):
        """Rooms seen in fixed slots followed by the supplied (or default) room pool."""
        pool = DEFAULT_ROOMS if rooms is None else rooms
        return _unique([slot.room for slot in self.fixed_slots] + list(pool))

    def known_batches(self):
        """Batches named by the class list, fixed slots and requirements."""
        batches = [group.name for group in self.classes]
        batches += [slot.batch for slot in self.fixed_slots]
        for requirement in self.subject_requirements:
            batches += list(requirement.batches)
        return _unique(batches)

    def generate(self):
        """Build the timetable and return a GenerationResult."""
        timetable = self._initialize_timetable()
        occupancy = OccupancyIndex()
        conflicts = []
        self.scheduled_hours = {}
        self.teacher_hours = {}

        print(f"Placing {len(self.fixed_slots)} fixed slots")
        self._place_fixed_slots(timetable, occupancy, conflicts)

        print(f"Scheduling {len(self.subject_requirements)} subject requirements")
        self._generate_remaining_slots(timetable, occupancy, conflicts)

        self.timetable = timetable
        self.occupancy = occupancy
        statistics = self.report_builder().calculate_statistics()

        if conflicts:
            print(f"WARNING: Generation finished with {len(conflicts)} conflict(s)")
        else:
            print("SUCCESS: Generation finished without conflicts")
        return GenerationResult(timetable=timetable, conflicts=conflicts, statistics=statistics)

    def report_builder(self):
        """ReportBuilder over the state of the last run."""
        if self.timetable is None:
            raise RuntimeError("generate() has not been run yet")
        return ReportBuilder(self.timetable, self.occupancy, self.teachers, self.rooms,
                             batches=self.known_batches())

    def _initialize_timetable(self):
        """Create an empty day-keyed map for every department referenced by the inputs."""
        departments = _unique([slot.department for slot in self.fixed_slots] +
                              [requirement.department for requirement in self.subject_requirements])
        timetable = {}
        for department in departments:
            timetable[department] = {day: {} for day in self.days}
        return timetable

    @staticmethod
    def _collision_message(kind, resource, day, time):
        return f"{kind.capitalize()} conflict: {resource} at {day} {time}"

    def _place_fixed_slots(self, timetable, occupancy, conflicts):
        """Place every fixed slot in input order. Collisions are reported, never rejected."""
        for fixed in self.fixed_slots:
            slot = PlacedSlot(
                department=fixed.department,
                day=fixed.day,
                time=fixed.time,
                subject=fixed.subject,
                teacher=fixed.faculty,
                room=fixed.room,
                batch=fixed.batch,
                is_fixed=True,
            )
            resources = {ROOM: fixed.room, TEACHER: fixed.faculty, BATCH: fixed.batch}
            for kind, key in OccupancyIndex.slot_keys(fixed.day, fixed.time, fixed.room, fixed.faculty, fixed.batch):
                if key in occupancy:
                    conflicts.append(self._collision_message(kind, resources[kind], fixed.day, fixed.time))

            self._place_in_cell(timetable, slot)
            occupancy.book_slot(slot)
            self._add_teacher_hour(fixed.faculty)

    @staticmethod
    def _shares_resource(first, second):
        return (first.room == second.room or first.teacher == second.teacher
                or first.batch == second.batch)

    def _place_in_cell(self, timetable, slot):
        """Append slot to its grid cell, replacing entries that share a room, teacher or batch."""
        day_cells = timetable.setdefault(slot.department, {}).setdefault(slot.day, {})
        cell = day_cells.setdefault(slot.time, [])
        kept = []
        for previous in cell:
            if self._shares_resource(previous, slot):
                print(f"    WARNING: {slot.department} {slot.day} {slot.time}: "
                      f"{previous.subject} [{previous.batch}] replaced by {slot.subject} [{slot.batch}]")
            else:
                kept.append(previous)
        kept.append(slot)
        day_cells[slot.time] = kept

    def _generate_remaining_slots(self, timetable, occupancy, conflicts):
        """Try to schedule hours_per_week slots for every (requirement, batch) pair."""
        for requirement in self.subject_requirements:
            candidates = [teacher for teacher in self.teachers if teacher.can_teach(requirement.subject)]
            if not candidates:
                print(f"    WARNING: No teacher can take {requirement.subject}")

            for batch in requirement.batches:
                target_hours = requirement.hours_per_week
                hours_scheduled = 0
                while hours_scheduled < target_hours:
                    slot = self._find_best_slot(requirement, batch, candidates, occupancy)
                    if slot is None:
                        remaining = target_hours - hours_scheduled
                        conflicts.append(f"Could not schedule {requirement.subject} for {batch} "
                                         f"({remaining} hour(s) remaining)")
                        print(f"      WARNING: {requirement.subject} [{batch}] - Only scheduled "
                              f"{hours_scheduled}/{target_hours} hours")
                        break
                    self._place_generated_slot(timetable, occupancy, slot)
                    hours_scheduled += 1

                key = (requirement.subject, batch)
                self.scheduled_hours[key] = self.scheduled_hours.get(key, 0) + hours_scheduled

    def _department_for(self, requirement):
        return requirement.department or FALLBACK_DEPARTMENT

    def _find_best_slot(self, requirement, batch, candidates, occupancy):
        """First-fit search over days, then time slots, then candidate teachers."""
        if not candidates:
            return None
        department = self._department_for(requirement)

        for day in self.days:
            for time in self.time_slots:
                if occupancy.is_occupied(day, time, BATCH, batch):
                    continue
                for teacher in candidates:
                    if not teacher.is_available(day, time):
                        continue
                    if occupancy.is_occupied(day, time, TEACHER, teacher.name):
                        continue
                    if self._at_max_hours(teacher):
                        continue
                    room = self._find_available_room(day, time, occupancy)
                    if room is None:
                        continue
                    return PlacedSlot(
                        department=department,
                        day=day,
                        time=time,
                        subject=requirement.subject,
                        teacher=teacher.name,
                        room=room,
                        batch=batch,
                        is_fixed=False,
                    )
        return None

    def _find_available_room(self, day, time, occupancy):
        for room in self.rooms:
            if not occupancy.is_occupied(day, time, ROOM, room):
                return room
        return None

    def _place_generated_slot(self, timetable, occupancy, slot):
        self._place_in_cell(timetable, slot)
        occupancy.book_slot(slot)
        self._add_teacher_hour(slot.teacher)

    def _add_teacher_hour(self, teacher_name):
        self.teacher_hours[teacher_name] = self.teacher_hours.get(teacher_name, 0) + 1

    def _at_max_hours(self, teacher):
        if not self.enforce_max_hours:
            return False
        return self.teacher_hours.get(teacher.name, 0) >= teacher.max_hours_per_week

    def get_scheduled_hours(self, subject, batch):
        """Hours placed for a (subject, batch) pair in the last run."""
        return self.scheduled_hours.get((subject, batch), 0)

    def requirement_summary(self):
        """Scheduled vs required hours per (requirement, batch), in input order."""
        return ReportBuilder.requirement_summary(self.subject_requirements, self.scheduled_hours)

    def validate_double_bookings(self):
        """Return every resource booked more than once at the same (day, time)."""
        return self.report_builder().find_double_bookings()
