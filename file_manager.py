"""Locating the uploaded workbooks and the output directory."""
import os
from config import INPUT_DIR, OUTPUT_DIR, REQUIRED_FILES, UPLOADS


class FileManager:
    """Resolves where the teachers, fixed-slots and subject-requirements uploads live."""

    INPUT_DIR = INPUT_DIR
    OUTPUT_DIR = OUTPUT_DIR
    REQUIRED_FILES = REQUIRED_FILES

    @staticmethod
    def configure(input_dir=None, output_dir=None):
        """Override the configured directories (e.g. from command line flags)."""
        if input_dir:
            FileManager.INPUT_DIR = input_dir
        if output_dir:
            FileManager.OUTPUT_DIR = output_dir

    @staticmethod
    def setup_directories():
        """Create the upload and output directories if they don't exist."""
        os.makedirs(FileManager.INPUT_DIR, exist_ok=True)
        os.makedirs(FileManager.OUTPUT_DIR, exist_ok=True)
        print(f"Upload directory: {FileManager.INPUT_DIR}")
        print(f"Output directory: {FileManager.OUTPUT_DIR}")

    @staticmethod
    def describe_upload(filename):
        """'<label> upload (<filename>): <columns>' for a known input file."""
        label, columns = UPLOADS.get(filename, (filename, ''))
        return f"{label} upload ({filename}): {columns}"

    @staticmethod
    def missing_input_files():
        """Required uploads not present in the input directory."""
        return [filename for filename in FileManager.REQUIRED_FILES
                if not os.path.exists(os.path.join(FileManager.INPUT_DIR, filename))]

    @staticmethod
    def check_input_files_exist():
        """Report each missing upload with the columns it should carry."""
        missing_files = FileManager.missing_input_files()
        if missing_files:
            for filename in missing_files:
                print(f"ERROR: Missing {FileManager.describe_upload(filename)}")
            print(f"Place the uploads in: {FileManager.INPUT_DIR} (or run with --write-samples)")
            return False
        print("SUCCESS: Teachers, fixed slots and subject requirements uploads found")
        return True

    @staticmethod
    def get_output_path(filename):
        return os.path.join(FileManager.OUTPUT_DIR, filename)

    @staticmethod
    def list_input_files():
        """Print the files in the input directory, naming the ones recognised as uploads."""
        if not os.path.exists(FileManager.INPUT_DIR):
            print("Upload directory does not exist.")
            return []
        files = sorted(os.listdir(FileManager.INPUT_DIR))
        print("Files in upload directory:")
        for file in files:
            label = UPLOADS[file][0] if file in UPLOADS else 'not used'
            print(f"  - {file} [{label}]")
        return files
