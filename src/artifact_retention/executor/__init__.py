"""Bounded-concurrency execution of per-item actions."""

from .batch import BatchReport, iter_chunks, run_batches

__all__ = ["BatchReport", "iter_chunks", "run_batches"]
