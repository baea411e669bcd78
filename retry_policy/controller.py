"""Interactive run over a workflows directory.

Stages, in order:

1. fail fast when the workflows root is missing
2. ask for the retry policy parameters (only the count is re-asked on bad input)
3. list workflow directories; stop when there are none
4. per workflow: optional up-to-date pre-check, confirmation, then
   read / check / merge / write for every step file
5. print the total

Per-file problems are reported and the file is skipped.  ``KeyboardInterrupt``
and ``EOFError`` are not caught here; files written before the interrupt stay
written.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .console import Terminal
from .documents import DocumentError, load_document, save_document
from .policy import (
    DEFAULT_BACKOFF_COEFFICIENT,
    DEFAULT_INITIAL_INTERVAL_MS,
    DEFAULT_MAXIMUM_INTERVAL_MS,
    DEFAULT_NUM_ATTEMPTS,
    DEFAULT_NUM_RETRIES,
    RetryConfig,
    apply_policy,
    has_desired_policy,
    is_eligible,
)
from .scanner import list_step_files, list_workflow_dirs

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Outcome of one run."""

    config: RetryConfig | None = None
    total_modified: int = 0
    modified: Dict[str, int] = field(default_factory=dict)
    skipped_workflows: List[str] = field(default_factory=list)
    failed_files: List[Path] = field(default_factory=list)
    aborted: bool = False


def _parse_int(text: str) -> int | None:
    try:
        return int(text)
    except ValueError:
        return None


def _parse_float(text: str) -> float | None:
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _ask_count(terminal: Terminal, count_mode: str) -> int:
    """Ask for the attempt (or retry) count until a valid number is given."""
    if count_mode == "retries":
        question, default, minimum = "Number of retries", DEFAULT_NUM_RETRIES, 0
        problem = "Error: number of retries must be a number >= 0"
    else:
        question, default, minimum = "Number of attempts", DEFAULT_NUM_ATTEMPTS, 1
        problem = "Error: numAttempts must be a number >= 1"
    while True:
        value = _parse_int(terminal.ask(question, str(default)))
        if value is not None and value >= minimum:
            return value
        terminal.say(problem)


def ask_retry_config(
    terminal: Terminal,
    count_mode: str = "attempts",
    prompt_coefficient: bool = True,
) -> RetryConfig:
    """Prompt for the retry policy and return it.

    Interval and coefficient answers that do not parse fall back to their
    defaults without asking again.
    """
    terminal.say("Please configure the retry policy:")
    count = _ask_count(terminal, count_mode)

    initial = _parse_int(terminal.ask("Initial interval (ms)", str(DEFAULT_INITIAL_INTERVAL_MS)))
    maximum = _parse_int(terminal.ask("Maximum interval (ms)", str(DEFAULT_MAXIMUM_INTERVAL_MS)))
    coefficient = None
    if prompt_coefficient:
        coefficient = _parse_float(
            terminal.ask("Backoff coefficient", f"{DEFAULT_BACKOFF_COEFFICIENT:g}")
        )

    options = dict(
        initial_interval_ms=DEFAULT_INITIAL_INTERVAL_MS if initial is None else initial,
        maximum_interval_ms=DEFAULT_MAXIMUM_INTERVAL_MS if maximum is None else maximum,
        backoff_coefficient=DEFAULT_BACKOFF_COEFFICIENT if coefficient is None else coefficient,
    )
    if count_mode == "retries":
        return RetryConfig.from_retries(count, **options)
    return RetryConfig(num_attempts=count, **options)


def _show_config(terminal: Terminal, config: RetryConfig) -> None:
    terminal.say()
    terminal.say("Retry policy configuration:")
    for key, value in config.as_mapping().items():
        terminal.say(f"  {key}: {value}")
    terminal.say()


def workflow_needs_update(workflow_path: Path, config: RetryConfig) -> bool:
    """Return True if any readable eligible step lacks the desired policy."""
    for name in list_step_files(workflow_path):
        try:
            doc = load_document(workflow_path / name)
        except DocumentError as exc:
            logger.debug("pre-check skipped %s", exc)
            continue
        if is_eligible(doc) and not has_desired_policy(doc, config):
            return True
    return False


def process_workflow(
    terminal: Terminal,
    workflow_path: Path,
    config: RetryConfig,
    summary: RunSummary,
    skip_up_to_date: bool = False,
) -> int:
    """Apply *config* to every eligible step in *workflow_path*.

    Returns the number of files rewritten.
    """
    step_files = list_step_files(workflow_path)
    if not step_files:
        terminal.say("  No block files found.")
        terminal.say()
        return 0

    modified = 0
    for name in step_files:
        step_path = workflow_path / name
        terminal.say(f"  Checking {name}...")
        try:
            doc = load_document(step_path)
        except DocumentError as exc:
            logger.error("Error reading YAML file %s", exc)
            terminal.say(f"    Error: Could not read {name}", style="red")
            summary.failed_files.append(step_path)
            continue

        if not is_eligible(doc):
            terminal.say("    Skipping: Not a datasource block with valid subtype")
            continue
        if skip_up_to_date and has_desired_policy(doc, config):
            terminal.say("    Skipping: retry policy already up to date")
            continue

        apply_policy(doc, config)
        try:
            save_document(step_path, doc)
        except DocumentError as exc:
            logger.error("Error writing YAML file %s", exc)
            terminal.say(f"    Error: Could not write {name}", style="red")
            summary.failed_files.append(step_path)
            continue
        terminal.say(f"    ✓ Modified {name}", style="green")
        modified += 1

    terminal.say(f"  Modified {modified} file(s) in this workflow")
    terminal.say()
    return modified


def run(
    terminal: Terminal,
    root: Path,
    *,
    count_mode: str = "attempts",
    prompt_coefficient: bool = True,
    skip_up_to_date: bool = True,
) -> RunSummary:
    """Run the interactive update over the workflows under *root*."""
    summary = RunSummary()
    root = Path(root)
    terminal.say("YAML Retry Policy Modifier Script")
    terminal.say("==================================")
    terminal.say()

    if not root.exists():
        terminal.error("Error: workflows directory not found!")
        summary.aborted = True
        return summary

    config = ask_retry_config(terminal, count_mode, prompt_coefficient)
    summary.config = config
    _show_config(terminal, config)

    workflow_dirs = list_workflow_dirs(root)
    if not workflow_dirs:
        terminal.error("No workflow directories found.")
        summary.aborted = True
        return summary

    terminal.say(f"Found {len(workflow_dirs)} workflow(s):")
    terminal.say()

    for workflow_name in workflow_dirs:
        workflow_path = root / workflow_name

        if skip_up_to_date and not workflow_needs_update(workflow_path, config):
            terminal.say(
                f'  Skipping workflow "{workflow_name}": '
                "no datasource block needs a retry policy update"
            )
            terminal.say()
            summary.skipped_workflows.append(workflow_name)
            continue

        if not terminal.ask_yes_no(f'Modify workflow "{workflow_name}"?'):
            terminal.say(f'  Skipping workflow "{workflow_name}"')
            terminal.say()
            summary.skipped_workflows.append(workflow_name)
            continue

        terminal.say(f"Processing workflow: {workflow_name}")
        count = process_workflow(terminal, workflow_path, config, summary, skip_up_to_date)
        summary.modified[workflow_name] = count
        summary.total_modified += count

    terminal.say()
    terminal.say(f"Completed! Modified {summary.total_modified} block file(s) total.")
    return summary
