from __future__ import annotations

from pathlib import Path
import requests
import typer

from changed_files import __version__
from changed_files.changed_files import (
    get_all_diff_files,
    get_changed_files_from_github_api,
    get_renamed_files,
    process_changed_files,
)
from changed_files.config import get_repository, load_env_file, load_event_payload, load_inputs
from changed_files.git_diff import GitDiffError, get_submodule_paths, resolve_diff_result
from changed_files.models import Platform
from changed_files.outputs import set_output
from changed_files.patterns import get_file_patterns, get_yaml_file_patterns
from changed_files.workflow import configure_logging, log_group, logger

app = typer.Typer(help="changed-files: list files changed between two revisions for CI workflows")


@app.callback()
def main() -> None:
    """changed-files command group."""


@app.command()
def run(
    path: str | None = typer.Option(None, help="Path to the repository (defaults to INPUT_PATH or '.')"),
    base_sha: str | None = typer.Option(None, help="Revision to diff from (defaults to the PR base or HEAD^)"),
    sha: str | None = typer.Option(None, help="Revision to diff to (defaults to HEAD)"),
    use_rest_api: bool | None = typer.Option(
        None, "--use-rest-api/--no-use-rest-api", help="Read the pull request file list from the GitHub API"
    ),
    json_output: bool | None = typer.Option(None, "--json/--no-json", help="Render file lists as JSON arrays"),
    debug: bool = typer.Option(False, help="Enable debug logging"),
) -> None:
    load_env_file(Path.cwd() / ".env")
    configure_logging(debug)

    try:
        inputs = load_inputs(
            path=path,
            base_sha=base_sha,
            sha=sha,
            use_rest_api=use_rest_api,
            json=json_output,
        )
        root = Path(inputs.path).resolve()
        file_patterns = get_file_patterns(inputs)
        yaml_file_patterns = get_yaml_file_patterns(inputs, root)
    except (ValueError, FileNotFoundError) as exc:
        typer.secho(f"Invalid inputs: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=2)

    if not root.exists():
        typer.secho(f"Path does not exist: {root}", fg=typer.colors.RED)
        raise typer.Exit(code=2)

    platform = Platform.detect()
    event = load_event_payload()
    pull_request = event.get("pull_request") or {}
    is_git_repo = (root / ".git").exists()

    if inputs.use_rest_api or (pull_request and not is_git_repo):
        if not pull_request.get("number"):
            typer.secho("The GitHub API source requires a pull_request event", fg=typer.colors.RED)
            raise typer.Exit(code=2)
        try:
            owner, repo = get_repository()
            all_diff_files = get_changed_files_from_github_api(inputs, owner, repo, int(pull_request["number"]))
        except ValueError as exc:
            typer.secho(str(exc), fg=typer.colors.RED)
            raise typer.Exit(code=2)
        except requests.RequestException as exc:
            typer.secho(f"GitHub API request failed: {exc}", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        if inputs.include_all_old_new_renamed_files:
            logger.warning("include_all_old_new_renamed_files is not supported with the GitHub API source")
    else:
        base = inputs.base_sha or (pull_request.get("base") or {}).get("sha", "")
        try:
            diff_result = resolve_diff_result(root, base, inputs.sha)
            submodule_paths = get_submodule_paths(root)
            diff_submodule = bool(submodule_paths)
            if diff_submodule:
                logger.info("Submodules found: %s", ", ".join(submodule_paths))

            all_diff_files = get_all_diff_files(
                root,
                diff_result,
                platform,
                diff_submodule=diff_submodule,
                submodule_paths=submodule_paths,
                output_renamed_files_as_deleted_and_added=inputs.output_renamed_files_as_deleted_and_added,
                fetch_additional_submodule_history=inputs.fetch_additional_submodule_history,
                fail_on_initial_diff_error=inputs.fail_on_initial_diff_error,
                fail_on_submodule_diff_error=inputs.fail_on_submodule_diff_error,
            )

            if inputs.include_all_old_new_renamed_files:
                with log_group("changed-files-all-old-new-renamed-files"):
                    renamed = get_renamed_files(
                        inputs,
                        root,
                        diff_result,
                        platform,
                        diff_submodule=diff_submodule,
                        submodule_paths=submodule_paths,
                    )
                    set_output("all_old_new_renamed_files", renamed["paths"], inputs)
                    set_output("all_old_new_renamed_files_count", renamed["count"], inputs)
        except GitDiffError as exc:
            typer.secho(str(exc), fg=typer.colors.RED)
            raise typer.Exit(code=2)

    process_changed_files(inputs, all_diff_files, platform, file_patterns, yaml_file_patterns)

    total = sum(len(paths) for paths in all_diff_files.values())
    typer.echo(f"Changed files total={total}")


@app.command()
def version() -> None:
    """Print the changed-files version."""
    typer.echo(__version__)


if __name__ == "__main__":
    app()
