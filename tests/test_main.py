import json
import os

import pandas as pd
import pytest

from file_manager import FileManager
from main import main


@pytest.fixture
def dirs(tmp_path, monkeypatch):
    input_dir = str(tmp_path / 'in')
    output_dir = str(tmp_path / 'out')
    monkeypatch.setattr(FileManager, 'INPUT_DIR', input_dir)
    monkeypatch.setattr(FileManager, 'OUTPUT_DIR', output_dir)
    return ['--input-dir', input_dir, '--output-dir', output_dir], input_dir, output_dir


def test_missing_inputs_fail(dirs):
    args, _, _ = dirs
    assert main(args) is False


def test_sample_run_writes_outputs_and_can_regenerate(dirs):
    args, input_dir, output_dir = dirs
    assert main(args + ['--write-samples']) is True
    assert sorted(os.listdir(input_dir)) == ['fixed_slots_data.xlsx', 'subjects_data.xlsx', 'teachers_data.xlsx']

    assert main(args) is True
    assert os.path.exists(os.path.join(output_dir, 'timetable.xlsx'))
    assert os.path.exists(os.path.join(output_dir, 'timetable.html'))
    stored = os.path.join(output_dir, 'storage', 'timetable_generated.json')
    with open(stored, encoding='utf-8') as fh:
        first_run = fh.read()

    assert main(args + ['--from-storage', '--no-html']) is True
    with open(stored, encoding='utf-8') as fh:
        assert fh.read() == first_run


def test_from_storage_without_saved_inputs_fails(dirs):
    args, _, _ = dirs
    assert main(args + ['--from-storage']) is False


def test_from_storage_keeps_class_list(dirs):
    args, input_dir, output_dir = dirs
    assert main(args + ['--write-samples']) is True
    pd.DataFrame([{'Name': 'MBA-9', 'Department': 'Management', 'Strength': 30}]).to_excel(
        os.path.join(input_dir, 'classes_data.xlsx'), index=False, engine='openpyxl')

    assert main(args + ['--no-html']) is True
    stored = os.path.join(output_dir, 'storage', 'timetable_generated.json')
    with open(stored, encoding='utf-8') as fh:
        first_run = json.load(fh)
    assert first_run['statistics']['batchUtilization']['MBA-9'] == 0

    os.remove(os.path.join(input_dir, 'classes_data.xlsx'))
    assert main(args + ['--from-storage', '--no-html']) is True
    with open(stored, encoding='utf-8') as fh:
        assert json.load(fh) == first_run


def test_missing_upload_is_named_with_its_columns(dirs, capsys):
    args, input_dir, _ = dirs
    assert main(args + ['--write-samples']) is True
    os.remove(os.path.join(input_dir, 'fixed_slots_data.xlsx'))

    assert main(args) is False
    out = capsys.readouterr().out
    assert ("ERROR: Missing Fixed slots upload (fixed_slots_data.xlsx): "
            "Department, Subject, Faculty, Day, Time, Room, Batch") in out
    assert "teachers_data.xlsx [Teachers]" in out
