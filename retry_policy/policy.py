"""Eligibility checks and the retry policy merge for step documents.

A step is eligible when it is a ``datasource`` block whose ``subtype`` names
one of the query kinds that support retries.  The merge always replaces
``blockData.retryPolicy`` as a whole; fields of an older policy are never
carried over.
"""
from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass

from ruamel.yaml.comments import CommentedMap

from .documents import Node

DATASOURCE_TYPE = "datasource"

# Stored lower-cased; subtypes are compared case-insensitively.
SUPPORTED_SUBTYPES = frozenset({
    "restquery",
    "graphqlquery",
    "sqlquery",
    "s3query",
    "firebasequery",
    "dynamoquery",
    "openapiqy",
})

DEFAULT_NUM_ATTEMPTS = 6
DEFAULT_NUM_RETRIES = DEFAULT_NUM_ATTEMPTS - 1
DEFAULT_INITIAL_INTERVAL_MS = 1000
DEFAULT_MAXIMUM_INTERVAL_MS = 20000
DEFAULT_BACKOFF_COEFFICIENT = 2.0


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy parameters entered by the operator for one run."""

    num_attempts: int
    initial_interval_ms: int = DEFAULT_INITIAL_INTERVAL_MS
    maximum_interval_ms: int = DEFAULT_MAXIMUM_INTERVAL_MS
    backoff_coefficient: float = DEFAULT_BACKOFF_COEFFICIENT

    def __post_init__(self) -> None:
        if self.num_attempts < 1:
            raise ValueError(f"num_attempts must be >= 1, got {self.num_attempts}")

    @classmethod
    def from_retries(cls, num_retries: int, **kwargs) -> "RetryConfig":
        """Build a config from a retry count (attempts = retries + 1)."""
        if num_retries < 0:
            raise ValueError(f"num_retries must be >= 0, got {num_retries}")
        return cls(num_attempts=num_retries + 1, **kwargs)

    def as_mapping(self) -> CommentedMap:
        """Return a fresh ``retryPolicy`` mapping in file key order."""
        coefficient = self.backoff_coefficient
        if float(coefficient).is_integer():
            coefficient = int(coefficient)
        return CommentedMap([
            ("numAttempts", self.num_attempts),
            ("initialIntervalMs", self.initial_interval_ms),
            ("maximumIntervalMs", self.maximum_interval_ms),
            ("backoffCoefficient", coefficient),
        ])


def is_eligible(doc: Node) -> bool:
    """Return True if *doc* is a datasource step with a supported subtype."""
    if not isinstance(doc, Mapping):
        return False
    if doc.get("type") != DATASOURCE_TYPE:
        return False
    subtype = doc.get("subtype")
    if not subtype or not isinstance(subtype, str):
        return False
    return subtype.lower() in SUPPORTED_SUBTYPES


def has_desired_policy(doc: Node, config: RetryConfig) -> bool:
    """Return True if *doc* already carries exactly the policy of *config*.

    Values are compared with ``==``; a coefficient of ``2.0000001`` does not
    match ``2``.
    """
    if not isinstance(doc, Mapping):
        return False
    block_data = doc.get("blockData")
    if not isinstance(block_data, Mapping):
        return False
    current = block_data.get("retryPolicy")
    if not isinstance(current, Mapping):
        return False
    wanted = config.as_mapping()
    return all(key in current and current[key] == value for key, value in wanted.items())


def apply_policy(doc: MutableMapping, config: RetryConfig) -> MutableMapping:
    """Set ``blockData.retryPolicy`` on *doc* from *config* and return *doc*.

    A missing or non-mapping ``blockData`` is replaced by an empty mapping
    first.  Any previous ``retryPolicy`` is discarded.
    """
    if not isinstance(doc.get("blockData"), MutableMapping):
        doc["blockData"] = CommentedMap()
    doc["blockData"]["retryPolicy"] = config.as_mapping()
    return doc
