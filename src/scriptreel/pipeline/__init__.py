"""Workflow orchestration."""

from .runner import ErrorPolicy, RunReport, SequentialRunner, Task, TaskFailure
from .workflows import Studio

__all__ = ["ErrorPolicy", "RunReport", "SequentialRunner", "Task", "TaskFailure", "Studio"]
