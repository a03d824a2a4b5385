"""Policy module - routing keywords, danger rules and the permission matrix.

This module provides the declarative tables and the engine that both the
classifier and the approval gate use to decide what is dangerous and who
may do what.
"""

from .engine import KeywordMatch, PermissionVerdict, PolicyEngine, serialize_payload
from .rules import DangerRule, DomainPolicy, KeywordRule

__all__ = [
    "DangerRule",
    "DomainPolicy",
    "KeywordMatch",
    "KeywordRule",
    "PermissionVerdict",
    "PolicyEngine",
    "serialize_payload",
]
