"""Sequential task runner with a declared error policy."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable

logger = logging.getLogger(__name__)


class ErrorPolicy(str, Enum):
    """What the runner does when a task raises."""
    CONTINUE = "continue"
    STOP = "stop"


@dataclass(frozen=True)
class Task:
    """A named unit of work awaited by the runner."""

    name: str
    fn: Callable[[], Awaitable[Any]]


@dataclass(frozen=True)
class TaskFailure:
    name: str
    error: Exception


@dataclass
class RunReport:
    """Outcome of a sequential run, in task order."""

    succeeded: list[str] = field(default_factory=list)
    failed: list[TaskFailure] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed and not self.skipped

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed) + len(self.skipped)


class SequentialRunner:
    """Awaits tasks one at a time, never overlapping them."""

    def __init__(self, policy: ErrorPolicy = ErrorPolicy.CONTINUE) -> None:
        self._policy = policy

    @property
    def policy(self) -> ErrorPolicy:
        return self._policy

    async def run(self, tasks: Iterable[Task]) -> RunReport:
        report = RunReport()
        pending = list(tasks)

        for index, task in enumerate(pending):
            try:
                await task.fn()
            except Exception as e:
                logger.error(f"Task {task.name} failed: {e}")
                report.failed.append(TaskFailure(task.name, e))
                if self._policy is ErrorPolicy.STOP:
                    report.skipped.extend(t.name for t in pending[index + 1:])
                    break
                continue
            report.succeeded.append(task.name)

        logger.info(
            f"Run finished: {len(report.succeeded)} succeeded, "
            f"{len(report.failed)} failed, {len(report.skipped)} skipped"
        )
        return report
