"""Excel file loader for the timetable generator."""
import os
import pandas as pd
from config import INPUT_DIR, REQUIRED_FILES, CLASSES_FILE, DAYS
from config import DEFAULT_AVAILABILITY, DEFAULT_MAX_HOURS, DEFAULT_HOURS_PER_WEEK, DEFAULT_REQUIRED_TEACHERS
from data_models import Teacher, FixedSlot, SubjectRequirement, ClassGroup


class InputDataError(ValueError):
    """Raised when uploaded rows are missing required fields."""


# Sample rows written by ExcelLoader.write_sample_file
SAMPLE_DATA = {
    'teachers': [
        {
            'ID': 'T001',
            'Name': 'Dr. John Smith',
            'Email': 'john.smith@college.edu',
            'Subjects': 'Data Structures, Algorithms',
            'Monday_Availability': '9:00-10:00, 10:00-11:00, 2:00-3:00',
            'Tuesday_Availability': '9:00-10:00, 11:00-12:00, 3:00-4:00',
            'Wednesday_Availability': '10:00-11:00, 2:00-3:00, 3:00-4:00',
            'Thursday_Availability': '9:00-10:00, 10:00-11:00, 2:00-3:00',
            'Friday_Availability': '9:00-10:00, 11:00-12:00',
            'MaxHours': 20
        },
        {
            'ID': 'T002',
            'Name': 'Prof. Sarah Johnson',
            'Email': 'sarah.johnson@college.edu',
            'Subjects': 'Database Systems, Web Development',
            'Monday_Availability': '10:00-11:00, 11:00-12:00, 3:00-4:00',
            'Tuesday_Availability': '9:00-10:00, 2:00-3:00, 3:00-4:00',
            'Wednesday_Availability': '9:00-10:00, 11:00-12:00, 2:00-3:00',
            'Thursday_Availability': '10:00-11:00, 11:00-12:00, 3:00-4:00',
            'Friday_Availability': '9:00-10:00, 10:00-11:00, 2:00-3:00',
            'MaxHours': 18
        }
    ],
    'fixed_slots': [
        {
            'Department': 'Computer Science',
            'Subject': 'Data Structures',
            'Faculty': 'Dr. John Smith',
            'Day': 'Monday',
            'Time': '9:00-10:00',
            'Room': 'CS-101',
            'Batch': 'CSE-A'
        },
        {
            'Department': 'Computer Science',
            'Subject': 'Database Systems',
            'Faculty': 'Prof. Sarah Johnson',
            'Day': 'Tuesday',
            'Time': '10:00-11:00',
            'Room': 'CS-102',
            'Batch': 'CSE-B'
        }
    ],
    'subjects': [
        {
            'Subject': 'Data Structures',
            'Department': 'Computer Science',
            'HoursPerWeek': 4,
            'Batches': 'CSE-A, CSE-B',
            'RequiredTeachers': 1
        },
        {
            'Subject': 'Database Systems',
            'Department': 'Computer Science',
            'HoursPerWeek': 3,
            'Batches': 'CSE-A, CSE-B, CSE-C',
            'RequiredTeachers': 2
        }
    ]
}


class ExcelLoader:
    """Handles loading of Excel files and turning their rows into typed records."""

    @staticmethod
    def _column_map(df):
        """Map lower-cased, stripped column names to the actual column labels."""
        return {str(col).strip().lower(): col for col in df.columns}

    @staticmethod
    def _cell(row, columns, *names):
        """Return the first non-blank value among the named columns, as a stripped string."""
        for name in names:
            col = columns.get(name.lower())
            if col is None:
                continue
            value = row.get(col)
            if pd.isna(value):
                continue
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            text = str(value).strip()
            if text:
                return text
        return ''

    @staticmethod
    def _split_list(text):
        """Split a comma separated cell into trimmed, non-empty items."""
        return [item.strip() for item in str(text).split(',') if item.strip()]

    @staticmethod
    def _to_int(text, default):
        if text == '':
            return default
        try:
            return int(float(text))
        except (TypeError, ValueError):
            print(f"INFO: Non-numeric value '{text}'; using default {default}")
            return default

    @staticmethod
    def _non_blank_rows(df):
        """Drop rows where every cell is empty."""
        return df.dropna(how='all')

    @staticmethod
    def _reject_missing(kind, missing):
        """Raise InputDataError listing (spreadsheet row, missing fields)."""
        if missing:
            details = "; ".join([f"row {row}: {', '.join(fields)}" for row, fields in missing])
            raise InputDataError(f"{kind}: missing required fields ({details})")

    @staticmethod
    def _sheet_row(idx):
        # Header occupies row 1
        try:
            return int(idx) + 2
        except (TypeError, ValueError):
            return idx

    @staticmethod
    def parse_availability(row, columns):
        """Per-day availability from '<Day>_Availability' or '<Day>' columns.
        Days left blank get the default availability (every slot except 12:00-1:00)."""
        availability = {}
        for day in DAYS:
            text = ExcelLoader._cell(row, columns, f"{day}_Availability", day)
            if text:
                availability[day] = ExcelLoader._split_list(text)
            else:
                availability[day] = list(DEFAULT_AVAILABILITY)
        return availability

    @staticmethod
    def parse_teachers(df):
        """Parse the teachers sheet. Required column: Name (or Teacher)."""
        teachers = []
        missing = []
        columns = ExcelLoader._column_map(df)
        for position, (idx, row) in enumerate(ExcelLoader._non_blank_rows(df).iterrows()):
            name = ExcelLoader._cell(row, columns, 'Name', 'Teacher')
            if not name:
                missing.append((ExcelLoader._sheet_row(idx), ['Name']))
                continue
            teacher_id = ExcelLoader._cell(row, columns, 'ID') or f"teacher-{position + 1}"
            email = ExcelLoader._cell(row, columns, 'Email') or f"{name.lower().replace(' ', '.')}@college.edu"
            teachers.append(Teacher(
                id=teacher_id,
                name=name,
                subjects=ExcelLoader._split_list(ExcelLoader._cell(row, columns, 'Subjects')),
                availability=ExcelLoader.parse_availability(row, columns),
                max_hours_per_week=ExcelLoader._to_int(ExcelLoader._cell(row, columns, 'MaxHours'), DEFAULT_MAX_HOURS),
                email=email
            ))
        ExcelLoader._reject_missing('Teachers', missing)
        print(f"SUCCESS: Parsed {len(teachers)} teachers")
        return teachers

    @staticmethod
    def parse_fixed_slots(df):
        """Parse the fixed slots sheet. Every column is required."""
        fixed_slots = []
        missing = []
        columns = ExcelLoader._column_map(df)
        for idx, row in ExcelLoader._non_blank_rows(df).iterrows():
            values = {
                'Department': ExcelLoader._cell(row, columns, 'Department'),
                'Subject': ExcelLoader._cell(row, columns, 'Subject'),
                'Faculty': ExcelLoader._cell(row, columns, 'Faculty', 'Teacher'),
                'Day': ExcelLoader._cell(row, columns, 'Day'),
                'Time': ExcelLoader._cell(row, columns, 'Time'),
                'Room': ExcelLoader._cell(row, columns, 'Room'),
                'Batch': ExcelLoader._cell(row, columns, 'Batch', 'Class')
            }
            blank = [field for field, value in values.items() if not value]
            if blank:
                missing.append((ExcelLoader._sheet_row(idx), blank))
                continue
            fixed_slots.append(FixedSlot(
                department=values['Department'],
                subject=values['Subject'],
                faculty=values['Faculty'],
                day=values['Day'],
                time=values['Time'],
                room=values['Room'],
                batch=values['Batch']
            ))
        ExcelLoader._reject_missing('Fixed slots', missing)
        print(f"SUCCESS: Parsed {len(fixed_slots)} fixed slots")
        return fixed_slots

    @staticmethod
    def parse_subject_requirements(df):
        """Parse the subject mapping sheet. Required columns: Subject, Department, Batches."""
        requirements = []
        missing = []
        columns = ExcelLoader._column_map(df)
        for idx, row in ExcelLoader._non_blank_rows(df).iterrows():
            subject = ExcelLoader._cell(row, columns, 'Subject')
            department = ExcelLoader._cell(row, columns, 'Department')
            batches = ExcelLoader._split_list(ExcelLoader._cell(row, columns, 'Batches'))
            blank = [field for field, value in [('Subject', subject), ('Department', department), ('Batches', batches)]
                     if not value]
            if blank:
                missing.append((ExcelLoader._sheet_row(idx), blank))
                continue
            required_teachers = ExcelLoader._to_int(ExcelLoader._cell(row, columns, 'RequiredTeachers'),
                                                    DEFAULT_REQUIRED_TEACHERS)
            if required_teachers > 1:
                print(f"INFO: {subject} asks for {required_teachers} teachers; one teacher is assigned per slot")
            requirements.append(SubjectRequirement(
                subject=subject,
                department=department,
                hours_per_week=ExcelLoader._to_int(ExcelLoader._cell(row, columns, 'HoursPerWeek'),
                                                   DEFAULT_HOURS_PER_WEEK),
                batches=batches,
                required_teachers=required_teachers
            ))
        ExcelLoader._reject_missing('Subjects', missing)
        print(f"SUCCESS: Parsed {len(requirements)} subject requirements")
        return requirements

    @staticmethod
    def parse_classes(df):
        """Parse the optional classes sheet. Required column: Name."""
        classes = []
        missing = []
        columns = ExcelLoader._column_map(df)
        for position, (idx, row) in enumerate(ExcelLoader._non_blank_rows(df).iterrows()):
            name = ExcelLoader._cell(row, columns, 'Name', 'Class')
            if not name:
                missing.append((ExcelLoader._sheet_row(idx), ['Name']))
                continue
            classes.append(ClassGroup(
                id=ExcelLoader._cell(row, columns, 'ID') or f"class-{position + 1}",
                name=name,
                department=ExcelLoader._cell(row, columns, 'Department'),
                strength=ExcelLoader._to_int(ExcelLoader._cell(row, columns, 'Strength'), 0),
                subjects=ExcelLoader._split_list(ExcelLoader._cell(row, columns, 'Subjects'))
            ))
        ExcelLoader._reject_missing('Classes', missing)
        print(f"SUCCESS: Parsed {len(classes)} classes")
        return classes

    @staticmethod
    def load_all_data(input_dir=None):
        """Loads all Excel files from the input directory into a dictionary of DataFrames."""
        input_dir = input_dir or INPUT_DIR
        data_frames = {}

        for filename in REQUIRED_FILES + [CLASSES_FILE]:
            filepath = os.path.join(input_dir, filename)
            key = filename.replace('_data.xlsx', '').replace('.xlsx', '')
            if not os.path.exists(filepath):
                if filename == CLASSES_FILE:
                    continue
                print(f"ERROR: File not found: {filepath}")
                return None
            try:
                df = pd.read_excel(filepath)
            except Exception as e:
                print(f"ERROR: Could not read {filename}")
                print(f"Error details: {e}")
                return None
            data_frames[key] = df
            print(f"SUCCESS: Loaded {filename} ({len(df)} records)")
            print(f"Columns: {df.columns.tolist()}")

        return data_frames

    @staticmethod
    def parse_all(data_frames):
        """Turn loaded DataFrames into the record collections the engine consumes."""
        records = {
            'teachers': ExcelLoader.parse_teachers(data_frames['teachers']),
            'fixed_slots': ExcelLoader.parse_fixed_slots(data_frames['fixed_slots']),
            'subject_requirements': ExcelLoader.parse_subject_requirements(data_frames['subjects']),
            'classes': []
        }
        if 'classes' in data_frames:
            records['classes'] = ExcelLoader.parse_classes(data_frames['classes'])
        return records

    @staticmethod
    def write_sample_file(kind, path):
        """Write a sample input workbook ('teachers', 'fixed_slots' or 'subjects')."""
        if kind not in SAMPLE_DATA:
            raise ValueError(f"Unknown sample type '{kind}'; expected one of {', '.join(SAMPLE_DATA)}")
        df = pd.DataFrame(SAMPLE_DATA[kind])
        df.to_excel(path, sheet_name='Data', index=False, engine='openpyxl')
        print(f"SUCCESS: Wrote sample {kind} file to {path}")
        return path
