from changed_files.config import Inputs
from changed_files.models import ChangeType, Platform, new_changed_files
from changed_files.pipeline import (
    get_all_change_type_files,
    get_change_type_files,
    iter_change_type_files,
)


def _files(**buckets):
    files = new_changed_files()
    for name, paths in buckets.items():
        files[ChangeType[name]] = list(paths)
    return files


def test_deduplicates_across_change_types():
    files = _files(ADDED=["x.txt", "y.txt"], MODIFIED=["y.txt"])
    out = get_change_type_files(Inputs(), files, [ChangeType.ADDED, ChangeType.MODIFIED], Platform())
    assert out == {"paths": "x.txt y.txt", "count": "2"}


def test_json_output_is_a_list():
    files = _files(ADDED=["x.txt", "y.txt"], MODIFIED=["y.txt"])
    out = get_change_type_files(Inputs(json=True), files, [ChangeType.ADDED, ChangeType.MODIFIED], Platform())
    assert out == {"paths": ["x.txt", "y.txt"], "count": "2"}


def test_caller_type_order_wins():
    files = _files(ADDED=["x.txt"], MODIFIED=["y.txt"])
    out = get_change_type_files(Inputs(json=True), files, [ChangeType.MODIFIED, ChangeType.ADDED], Platform())
    assert out["paths"] == ["y.txt", "x.txt"]


def test_custom_separator_and_empty_paths():
    files = _files(ADDED=["", "a.txt", "b.txt"])
    out = get_change_type_files(Inputs(separator=","), files, [ChangeType.ADDED], Platform())
    assert out == {"paths": "a.txt,b.txt", "count": "2"}


def test_spaces_are_normalized():
    files = _files(MODIFIED=["my folder/my file.txt"])
    out = get_change_type_files(Inputs(json=True), files, [ChangeType.MODIFIED], Platform())
    assert out["paths"] == ["my-folder/my-file.txt"]


def test_dir_names_collapse():
    files = _files(MODIFIED=["a/b/c/file.txt", "a/d.txt"])
    inputs = Inputs(json=True, dir_names=True, dir_names_max_depth=1)
    out = get_change_type_files(inputs, files, [ChangeType.MODIFIED], Platform())
    assert out == {"paths": ["a"], "count": "1"}


def test_dir_names_current_dir():
    files = _files(ADDED=["README.md", "src/x.py"])

    kept = get_change_type_files(Inputs(json=True, dir_names=True), files, [ChangeType.ADDED], Platform())
    assert kept["paths"] == [".", "src"]

    inputs = Inputs(json=True, dir_names=True, dir_names_exclude_current_dir=True)
    dropped = get_change_type_files(inputs, files, [ChangeType.ADDED], Platform())
    assert dropped == {"paths": ["src"], "count": "1"}


def test_dir_names_include_files_adds_a_second_entry():
    files = _files(ADDED=["docs/guide.md", "src/app.py"])
    inputs = Inputs(json=True, dir_names=True, dir_names_include_files="**/*.md")
    out = get_change_type_files(inputs, files, [ChangeType.ADDED], Platform())
    assert out == {"paths": ["docs/guide.md", "docs", "src"], "count": "3"}


def test_windows_posix_separator():
    files = _files(ADDED=["src\\my dir\\f.txt"])
    windows = Platform(is_windows=True)

    posix = get_change_type_files(Inputs(json=True, use_posix_path_separator=True), files, [ChangeType.ADDED], windows)
    assert posix["paths"] == ["src/my-dir/f.txt"]

    native = get_change_type_files(Inputs(json=True), files, [ChangeType.ADDED], windows)
    assert native["paths"] == ["src\\my-dir\\f.txt"]


def test_posix_flag_ignored_off_windows():
    files = _files(ADDED=["src/a.txt"])
    out = get_change_type_files(Inputs(json=True, use_posix_path_separator=True), files, [ChangeType.ADDED], Platform())
    assert out["paths"] == ["src/a.txt"]


def test_all_change_type_files():
    files = _files(ADDED=["a.txt"], DELETED=["b.txt"], UNKNOWN=["c.txt"], MODIFIED=["a.txt"])
    out = get_all_change_type_files(Inputs(json=True), files, Platform())
    assert out == {"paths": ["a.txt", "b.txt", "c.txt"], "count": "3"}


def test_pipeline_is_lazy():
    files = _files(ADDED=["a.txt", "b.txt"])
    it = iter_change_type_files(Inputs(), files, [ChangeType.ADDED], Platform())
    assert next(it) == "a.txt"
    assert list(it) == ["b.txt"]


def test_dir_names_include_files_star_is_top_level_only():
    files = _files(ADDED=["docs/guide.md", "NOTES.md"])
    inputs = Inputs(json=True, dir_names=True, dir_names_include_files="*.md")
    out = get_change_type_files(inputs, files, [ChangeType.ADDED], Platform())
    assert out == {"paths": ["docs", "NOTES.md", "."], "count": "3"}
