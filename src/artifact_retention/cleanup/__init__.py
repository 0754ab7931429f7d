"""Cleanup run orchestration."""

from .runner import (
    CleanupPlan,
    build_plan,
    cleanup_item,
    find_artifacts,
    plan_cleanup,
    resolve_settings,
    run_cleanup,
)

__all__ = [
    "CleanupPlan",
    "build_plan",
    "cleanup_item",
    "find_artifacts",
    "plan_cleanup",
    "resolve_settings",
    "run_cleanup",
]
