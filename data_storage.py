"""JSON-file repository for uploaded inputs and the last generated timetable."""
import json
import os
from datetime import datetime

from config import STORAGE_DIR, STORAGE_KEYS
from data_models import Teacher, FixedSlot, SubjectRequirement, ClassGroup, GenerationResult


class DataStorage:
    """Saves and loads the input collections (teachers, fixed slots, subject mappings, classes)
    and the last GenerationResult.

    Each key in STORAGE_KEYS is stored as '<key>.json' inside the storage directory.
    """

    def __init__(self, storage_dir=None):
        self.storage_dir = storage_dir or STORAGE_DIR

    def _path(self, key):
        return os.path.join(self.storage_dir, f"{key}.json")

    def _write(self, key, data):
        os.makedirs(self.storage_dir, exist_ok=True)
        with open(self._path(key), "w", encoding="utf-8") as fh:
            json.dump(data, fh, ensure_ascii=False, indent=2)

    def _read(self, key):
        path = self._path(key)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as fh:
            return json.load(fh)

    def save_teachers(self, teachers):
        self._write(STORAGE_KEYS['TEACHERS'], [teacher.to_dict() for teacher in teachers])

    def get_teachers(self):
        return [Teacher.from_dict(item) for item in self._read(STORAGE_KEYS['TEACHERS']) or []]

    def save_fixed_slots(self, fixed_slots):
        self._write(STORAGE_KEYS['FIXED_SLOTS'], [slot.to_dict() for slot in fixed_slots])

    def get_fixed_slots(self):
        return [FixedSlot.from_dict(item) for item in self._read(STORAGE_KEYS['FIXED_SLOTS']) or []]

    def save_subject_mappings(self, requirements):
        self._write(STORAGE_KEYS['SUBJECT_MAPPINGS'], [requirement.to_dict() for requirement in requirements])

    def get_subject_mappings(self):
        return [SubjectRequirement.from_dict(item) for item in self._read(STORAGE_KEYS['SUBJECT_MAPPINGS']) or []]

    def save_classes(self, classes):
        self._write(STORAGE_KEYS['CLASSES'], [group.to_dict() for group in classes])

    def get_classes(self):
        return [ClassGroup.from_dict(item) for item in self._read(STORAGE_KEYS['CLASSES']) or []]

    def save_generation_result(self, result, generated_at=None):
        """Store the result and the time it was generated."""
        generated_at = generated_at or datetime.now()
        self._write(STORAGE_KEYS['GENERATED_TIMETABLE'], result.to_dict())
        self._write(STORAGE_KEYS['LAST_GENERATION'], generated_at.isoformat())

    def get_generation_result(self):
        data = self._read(STORAGE_KEYS['GENERATED_TIMETABLE'])
        return GenerationResult.from_dict(data) if data is not None else None

    def get_last_generation_time(self):
        data = self._read(STORAGE_KEYS['LAST_GENERATION'])
        return datetime.fromisoformat(data) if data else None

    def clear_all_data(self):
        for key in STORAGE_KEYS.values():
            path = self._path(key)
            if os.path.exists(path):
                os.remove(path)

    def export_data(self):
        """All stored data as one JSON document."""
        result = self._read(STORAGE_KEYS['GENERATED_TIMETABLE'])
        data = {
            'teachers': self._read(STORAGE_KEYS['TEACHERS']) or [],
            'fixedSlots': self._read(STORAGE_KEYS['FIXED_SLOTS']) or [],
            'subjectMappings': self._read(STORAGE_KEYS['SUBJECT_MAPPINGS']) or [],
            'classes': self._read(STORAGE_KEYS['CLASSES']) or [],
            'generatedTimetable': result,
            'lastGeneration': self._read(STORAGE_KEYS['LAST_GENERATION'])
        }
        return json.dumps(data, ensure_ascii=False, indent=2)

    def import_data(self, json_data):
        """Restore a document produced by export_data. Returns False if it cannot be parsed."""
        try:
            data = json.loads(json_data)
            teachers = [Teacher.from_dict(item) for item in data.get('teachers') or []]
            fixed_slots = [FixedSlot.from_dict(item) for item in data.get('fixedSlots') or []]
            requirements = [SubjectRequirement.from_dict(item) for item in data.get('subjectMappings') or []]
            classes = [ClassGroup.from_dict(item) for item in data.get('classes') or []]
            result = data.get('generatedTimetable')
            result = GenerationResult.from_dict(result) if result else None
            last_generation = data.get('lastGeneration')
            last_generation = datetime.fromisoformat(last_generation) if last_generation else None
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            print(f"ERROR: Could not import data: {e}")
            return False

        if teachers:
            self.save_teachers(teachers)
        if fixed_slots:
            self.save_fixed_slots(fixed_slots)
        if requirements:
            self.save_subject_mappings(requirements)
        if classes:
            self.save_classes(classes)
        if result is not None:
            self.save_generation_result(result, generated_at=last_generation)
        return True
