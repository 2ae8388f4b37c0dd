"""Main execution module for Excel-based department timetable generation."""
import argparse
import os
import sys

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from file_manager import FileManager
from excel_loader import ExcelLoader
from schedule_generator import ScheduleGenerator
from excel_exporter import ExcelExporter
from html_exporter import generate_html
from data_storage import DataStorage
from config import REQUIRED_FILES, TIMETABLE_HTML_FILENAME, ENFORCE_MAX_HOURS


class TimetableGenerator:
    """Main class to coordinate timetable generation from Excel files."""

    def __init__(self, storage=None, enforce_max_hours=ENFORCE_MAX_HOURS):
        self.data_frames = None
        self.records = None
        self.schedule_generator = None
        self.result = None
        self.storage = storage or DataStorage()
        self.enforce_max_hours = enforce_max_hours

    def setup_environment(self):
        """Set up directories and load the uploaded Excel data."""
        FileManager.setup_directories()

        if not FileManager.check_input_files_exist():
            FileManager.list_input_files()
            raise FileNotFoundError("Missing required Excel files")

        self.data_frames = ExcelLoader.load_all_data(FileManager.INPUT_DIR)
        if self.data_frames is None:
            raise RuntimeError("Failed to load data from Excel files")

        self.records = ExcelLoader.parse_all(self.data_frames)
        self.storage.save_teachers(self.records['teachers'])
        self.storage.save_fixed_slots(self.records['fixed_slots'])
        self.storage.save_subject_mappings(self.records['subject_requirements'])
        self.storage.save_classes(self.records['classes'])
        print("Environment setup completed")

    def load_from_storage(self):
        """Use the inputs saved by a previous run instead of reading Excel files."""
        self.records = {
            'teachers': self.storage.get_teachers(),
            'fixed_slots': self.storage.get_fixed_slots(),
            'subject_requirements': self.storage.get_subject_mappings(),
            'classes': self.storage.get_classes()
        }
        if not self.records['teachers'] or not self.records['subject_requirements']:
            raise RuntimeError(f"No saved inputs found in {self.storage.storage_dir}")
        print(f"SUCCESS: Loaded saved inputs from {self.storage.storage_dir}")

    def get_data_summary(self):
        """Print summary of loaded input records."""
        if not self.records:
            return
        print("\nINPUT DATA SUMMARY:")
        for key, items in self.records.items():
            print(f"  {key}: {len(items)} records")

        requirements = self.records['subject_requirements']
        if requirements:
            print("\nHOURS REQUESTED BY DEPARTMENT:")
            totals = {}
            for requirement in requirements:
                hours = requirement.hours_per_week * len(requirement.batches)
                totals[requirement.department] = totals.get(requirement.department, 0) + hours
            for department, hours in totals.items():
                print(f"  {department}: {hours} hours/week")

    def generate_timetable(self):
        """Run the schedule engine over the loaded records."""
        print("\n" + "=" * 80)
        print("GENERATING TIMETABLE")
        print("=" * 80)
        self.schedule_generator = ScheduleGenerator(
            self.records['teachers'],
            self.records['fixed_slots'],
            self.records['subject_requirements'],
            classes=self.records.get('classes'),
            enforce_max_hours=self.enforce_max_hours
        )
        self.result = self.schedule_generator.generate()
        self.storage.save_generation_result(self.result)
        return self.result

    def export_outputs(self, html=True):
        """Write the Excel workbook and, optionally, the printable HTML page."""
        exporter = ExcelExporter(self.result, self.schedule_generator)
        workbook_path = exporter.export_timetable()
        ExcelExporter.export_teachers(self.records['teachers'])
        if html:
            generate_html(self.result, FileManager.get_output_path(TIMETABLE_HTML_FILENAME))
        return workbook_path is not None

    def print_summary(self):
        """Print generation summary."""
        stats = self.result.statistics
        print("\n" + "=" * 80)
        print("GENERATION COMPLETE!" if not self.result.conflicts else "GENERATION COMPLETE WITH CONFLICTS!")
        print(f"  Total slots: {stats.total_slots}")
        print(f"  Fixed slots: {stats.fixed_slots}")
        print(f"  Generated slots: {stats.generated_slots}")
        print("\nTeacher utilization:")
        for name, count in stats.teacher_utilization.items():
            print(f"  - {name}: {count}")

        if self.result.conflicts:
            print(f"\n{len(self.result.conflicts)} conflicts detected:")
            for conflict in self.result.conflicts:
                print(f"  - {conflict}")
        print(f"\nFiles saved in: {FileManager.OUTPUT_DIR}")
        print("=" * 80)

    def report_double_bookings(self):
        """Print every resource booked twice at the same day and time."""
        double_bookings = self.schedule_generator.validate_double_bookings()
        if not double_bookings:
            print("\nNo double bookings detected.")
            return double_bookings
        print("\nDOUBLE BOOKINGS DETECTED:")
        for booking in double_bookings:
            entries = "; ".join([f"{dept}:{subject} ({batch})" for dept, subject, batch in booking['entries']])
            print(f"  - {booking['day']} {booking['time']} | {booking['kind']} {booking['resource']} -> {entries}")
        return double_bookings


def build_parser():
    parser = argparse.ArgumentParser(description="Department weekly timetable generator")
    parser.add_argument("--input-dir", help="directory holding the uploaded Excel files")
    parser.add_argument("--output-dir", help="directory for the exported timetable")
    parser.add_argument("--storage-dir", help="directory for saved inputs and results")
    parser.add_argument("--from-storage", action="store_true",
                        help="regenerate from the inputs saved by the previous run")
    parser.add_argument("--enforce-max-hours", action="store_true", default=ENFORCE_MAX_HOURS,
                        help="treat each teacher's MaxHours as a hard weekly cap")
    parser.add_argument("--no-html", action="store_true", help="skip the printable HTML export")
    parser.add_argument("--write-samples", action="store_true",
                        help="write sample input workbooks into the input directory and exit")
    return parser


def write_samples():
    """Write one sample workbook per required input file."""
    FileManager.setup_directories()
    for kind, filename in zip(['teachers', 'fixed_slots', 'subjects'], REQUIRED_FILES):
        ExcelLoader.write_sample_file(kind, os.path.join(FileManager.INPUT_DIR, filename))


def main(argv=None):
    """Main function to generate the timetable from Excel files."""
    args = build_parser().parse_args(argv)
    FileManager.configure(args.input_dir, args.output_dir)

    if args.write_samples:
        write_samples()
        return True

    storage_dir = args.storage_dir
    if storage_dir is None and args.output_dir:
        storage_dir = os.path.join(args.output_dir, 'storage')
    generator = TimetableGenerator(storage=DataStorage(storage_dir), enforce_max_hours=args.enforce_max_hours)

    try:
        print("Starting Timetable Generator...")
        if args.from_storage:
            FileManager.setup_directories()
            generator.load_from_storage()
        else:
            generator.setup_environment()
        generator.get_data_summary()
        generator.generate_timetable()
        if not generator.export_outputs(html=not args.no_html):
            print("WARNING: Timetable export failed")
        generator.print_summary()
        generator.report_double_bookings()
        return True

    except Exception as e:
        print(f"ERROR: {e}")
        print("\nPlease check:")
        for filename in REQUIRED_FILES:
            print(f"- {FileManager.describe_upload(filename)}")
        import traceback
        traceback.print_exc()
        return False


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
