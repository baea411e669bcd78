"""Discovery of workflow directories and their step files."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

STEP_SUFFIX = ".yml"
# Workflow-level files that live next to the steps but are not steps.
RESERVED_FILES = ("workflow.yml", "startTrigger.yml")


def list_workflow_dirs(root: Path) -> List[str]:
    """Return the names of the directories directly under *root*, sorted."""
    try:
        return sorted(entry.name for entry in Path(root).iterdir() if entry.is_dir())
    except OSError as exc:
        logger.error("Error reading workflows directory %s: %s", root, exc)
        return []


def list_step_files(workflow_dir: Path) -> List[str]:
    """Return the step file names in *workflow_dir*, sorted.

    Only ``*.yml`` files count; ``workflow.yml`` and ``startTrigger.yml`` are
    excluded.
    """
    try:
        names = [entry.name for entry in Path(workflow_dir).iterdir() if entry.is_file()]
    except OSError as exc:
        logger.error("Error reading workflow directory %s: %s", workflow_dir, exc)
        return []
    return sorted(
        name for name in names
        if name.endswith(STEP_SUFFIX) and name not in RESERVED_FILES
    )
