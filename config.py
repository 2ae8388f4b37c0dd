"""Configuration settings for the department timetable generator."""
import os

# Directory paths
INPUT_DIR = os.environ.get('TIMETABLE_INPUT_DIR', 'timetable_inputs')
OUTPUT_DIR = os.environ.get('TIMETABLE_OUTPUT_DIR', 'output')
STORAGE_DIR = os.environ.get('TIMETABLE_STORAGE_DIR', os.path.join(OUTPUT_DIR, 'storage'))

# Required Excel input files
TEACHERS_FILE = 'teachers_data.xlsx'
FIXED_SLOTS_FILE = 'fixed_slots_data.xlsx'
SUBJECTS_FILE = 'subjects_data.xlsx'
CLASSES_FILE = 'classes_data.xlsx'  # optional

REQUIRED_FILES = [
    TEACHERS_FILE,
    FIXED_SLOTS_FILE,
    SUBJECTS_FILE
]

# Upload label and expected columns per input file
UPLOADS = {
    TEACHERS_FILE: ('Teachers', 'Name, Subjects, <Day>_Availability, MaxHours'),
    FIXED_SLOTS_FILE: ('Fixed slots', 'Department, Subject, Faculty, Day, Time, Room, Batch'),
    SUBJECTS_FILE: ('Subject requirements', 'Subject, Department, HoursPerWeek, Batches, RequiredTeachers'),
    CLASSES_FILE: ('Classes (optional)', 'Name, Department, Strength, Subjects'),
}

# Time scheduling configuration
DAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday']

# Teaching time slots, one hour each (lunch 1:00-2:00 is not a slot)
TIME_SLOTS = [
    '9:00-10:00', '10:00-11:00', '11:00-12:00',
    '12:00-1:00',
    '2:00-3:00', '3:00-4:00'
]

# Default room pool, appended after rooms seen in fixed slots
DEFAULT_ROOMS = [
    'CS-101', 'CS-102', 'CS-103', 'CS-104', 'CS-105',
    'M-201', 'M-202',
    'P-301', 'P-302'
]

# Ingestion defaults for blank spreadsheet cells
DEFAULT_AVAILABILITY = ['9:00-10:00', '10:00-11:00', '11:00-12:00', '2:00-3:00', '3:00-4:00']
DEFAULT_MAX_HOURS = 20
DEFAULT_HOURS_PER_WEEK = 3
DEFAULT_REQUIRED_TEACHERS = 1

# Department used when a generated slot has no department
FALLBACK_DEPARTMENT = 'General'

# Treat Teacher.max_hours_per_week as a hard cap during placement
ENFORCE_MAX_HOURS = False

# Keys for the JSON data store
STORAGE_KEYS = {
    'TEACHERS': 'timetable_teachers',
    'FIXED_SLOTS': 'timetable_fixed_slots',
    'SUBJECT_MAPPINGS': 'timetable_subject_mappings',
    'GENERATED_TIMETABLE': 'timetable_generated',
    'LAST_GENERATION': 'timetable_last_generation',
    'CLASSES': 'timetable_classes'
}

# Output workbook
TIMETABLE_FILENAME = 'timetable.xlsx'
TIMETABLE_HTML_FILENAME = 'timetable.html'
TEACHERS_EXPORT_FILENAME = 'teachers.xlsx'

# Workbook sheets written after the department timetables
REPORT_SHEETS = ['Summary', 'Requirements', 'Conflicts', 'Utilization']
