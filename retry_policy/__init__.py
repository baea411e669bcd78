"""Retry policy updater package.

This package walks a directory of workflow definitions and adds a
``blockData.retryPolicy`` block to datasource steps whose subtype supports
retries.  The operator is asked for the policy parameters once and then
confirms each workflow before any file is rewritten.  YAML files are edited
with ruamel.yaml in round-trip mode so comments and unknown fields survive.
"""

__all__ = ["cli"]
__version__ = "0.1.0"
