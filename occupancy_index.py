"""Occupancy tracking for rooms, teachers and batches per (day, time-slot)."""

ROOM = 'room'
TEACHER = 'teacher'
BATCH = 'batch'


class OccupancyIndex:
    """Maps (day, time, kind, resource) to the slot occupying it.

    The index keeps the latest slot per key. Every booking is also appended to
    a per-key log so that collisions between fixed slots stay visible after
    the index entry has been overwritten.
    """

    def __init__(self):
        self._occupied = {}
        self._bookings = {}

    def __len__(self):
        return len(self._occupied)

    def __contains__(self, key):
        return key in self._occupied

    @staticmethod
    def slot_keys(day, time, room, teacher, batch):
        """Return the (kind, key) pairs a slot occupies, in room/teacher/batch order."""
        return [
            (ROOM, (day, time, ROOM, room)),
            (TEACHER, (day, time, TEACHER, teacher)),
            (BATCH, (day, time, BATCH, batch)),
        ]

    def is_occupied(self, day, time, kind, resource):
        return (day, time, kind, resource) in self._occupied

    def book(self, key, slot):
        self._occupied[key] = slot
        self._bookings.setdefault(key, []).append(slot)

    def book_slot(self, slot):
        """Book the room, teacher and batch keys of a placed slot."""
        for _, key in self.slot_keys(slot.day, slot.time, slot.room, slot.teacher, slot.batch):
            self.book(key, slot)

    def items(self):
        return self._occupied.items()

    def bookings(self):
        """Every key with the full list of slots booked against it."""
        return self._bookings.items()
