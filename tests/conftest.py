import logging

import pytest

from changed_files.workflow import WorkflowCommandHandler


@pytest.fixture(autouse=True)
def _reset_workflow_logging():
    yield
    root = logging.getLogger("changed_files")
    for handler in list(root.handlers):
        if isinstance(handler, WorkflowCommandHandler):
            root.removeHandler(handler)
    root.setLevel(logging.NOTSET)
