from pathlib import Path

import pytest

from changed_files.config import get_repository, load_env_file, load_event_payload, load_inputs


def test_defaults(monkeypatch):
    monkeypatch.delenv("INPUT_JSON", raising=False)
    monkeypatch.delenv("INPUT_SEPARATOR", raising=False)
    inputs = load_inputs()
    assert inputs.json is False
    assert inputs.separator == " "
    assert inputs.old_new_separator == ","
    assert inputs.dir_names_max_depth is None


def test_reads_action_inputs(monkeypatch):
    monkeypatch.setenv("INPUT_JSON", "true")
    monkeypatch.setenv("INPUT_DIR_NAMES", "True")
    monkeypatch.setenv("INPUT_DIR_NAMES_MAX_DEPTH", "2")
    monkeypatch.setenv("INPUT_SEPARATOR", ",")
    monkeypatch.setenv("INPUT_FILES_YAML", "frontend: '*.ts'")

    inputs = load_inputs()

    assert inputs.json is True
    assert inputs.dir_names is True
    assert inputs.dir_names_max_depth == 2
    assert inputs.separator == ","
    assert inputs.files_yaml == "frontend: '*.ts'"


def test_invalid_inputs(monkeypatch):
    monkeypatch.setenv("INPUT_JSON", "maybe")
    with pytest.raises(ValueError):
        load_inputs()

    monkeypatch.setenv("INPUT_JSON", "false")
    monkeypatch.setenv("INPUT_DIR_NAMES_MAX_DEPTH", "deep")
    with pytest.raises(ValueError):
        load_inputs()


def test_overrides_win_unless_none(monkeypatch):
    monkeypatch.setenv("INPUT_SHA", "from-env")
    monkeypatch.setenv("INPUT_BASE_SHA", "base-from-env")
    inputs = load_inputs(sha="from-cli", base_sha=None)
    assert inputs.sha == "from-cli"
    assert inputs.base_sha == "base-from-env"

    with pytest.raises(ValueError):
        load_inputs(not_an_input=True)


def test_token_falls_back_to_github_token(monkeypatch):
    monkeypatch.delenv("INPUT_TOKEN", raising=False)
    monkeypatch.setenv("GITHUB_TOKEN", "ghs_x")
    assert load_inputs().token == "ghs_x"


def test_load_env_file_does_not_override(tmp_path: Path, monkeypatch):
    env = tmp_path / ".env"
    env.write_text("# local\nINPUT_SEPARATOR=','\nINPUT_JSON=true\n")
    monkeypatch.setenv("INPUT_JSON", "false")
    # registered with monkeypatch so the loaded value is undone after the test
    monkeypatch.setenv("INPUT_SEPARATOR", "placeholder")
    monkeypatch.delenv("INPUT_SEPARATOR")

    load_env_file(env)

    inputs = load_inputs()
    assert inputs.separator == ","
    assert inputs.json is False


def test_event_payload_and_repository(tmp_path: Path, monkeypatch):
    event = tmp_path / "event.json"
    event.write_text('{"pull_request": {"number": 7}}')
    monkeypatch.setenv("GITHUB_EVENT_PATH", str(event))
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo/repo")

    assert load_event_payload()["pull_request"]["number"] == 7
    assert get_repository() == ("octo", "repo")

    monkeypatch.delenv("GITHUB_EVENT_PATH")
    assert load_event_payload() == {}
    monkeypatch.setenv("GITHUB_REPOSITORY", "broken")
    with pytest.raises(ValueError):
        get_repository()


def test_load_env_file_keeps_quoted_whitespace(tmp_path: Path, monkeypatch):
    env = tmp_path / ".env"
    env.write_text("export INPUT_SEPARATOR=' '\nINPUT_FILES=\"src/**\"\nnot a variable\n=orphan\n")
    for name in ("INPUT_SEPARATOR", "INPUT_FILES"):
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)

    applied = load_env_file(env)

    assert applied == ["INPUT_SEPARATOR", "INPUT_FILES"]
    inputs = load_inputs()
    assert inputs.separator == " "
    assert inputs.files == "src/**"


def test_load_env_file_missing(tmp_path: Path):
    assert load_env_file(tmp_path / ".env") == []
