"""
Script Engine
-------------
Runs one raw input: parse -> resolve -> execute -> collect.

Rules:
- Commands run strictly in order; each handler is awaited before the next
- A missing skill or a failing skill never stops the rest of the plan
- Nothing escapes run(): every outcome is a report entry, parser failures included
- No timeouts, no cancellation, no rollback of earlier commands
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional
import asyncio
import logging
import time

from commands.parser import PlanParser
from commands.plan import Command
from infra.logging import RunContext, log_run_end
from skills.registry import SkillRegistry

from .errors import ErrorCategory, ErrorHandler, MeghError


class EntryStatus(str, Enum):
    """Outcome of one report entry."""
    OK = "ok"
    NO_HANDLER = "no_handler"
    ERROR = "error"
    NO_INPUT = "no_input"
    MALFORMED = "malformed"


@dataclass
class EngineConfig:
    """Report markers for the engine."""
    no_input_marker: str = "(no input)"
    ok_marker: str = "OK"
    no_handler_format: str = "No skill for verb: {verb}"
    error_format: str = "Error: {error}"


@dataclass
class ReportEntry:
    """One command's outcome."""
    verb: str
    text: str
    status: EntryStatus
    skill: Optional[str] = None
    execution_time_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.status == EntryStatus.OK

    def __repr__(self) -> str:
        mark = "✓" if self.success else "✗"
        return f"ReportEntry({mark} {self.verb}: {self.text})"


@dataclass
class ExecutionReport:
    """Ordered outcomes, one per command in the plan."""
    entries: List[ReportEntry] = field(default_factory=list)
    run_id: str = ""

    def lines(self) -> List[str]:
        """Plain text entries in plan order."""
        return [entry.text for entry in self.entries]

    @property
    def ok(self) -> bool:
        return all(entry.success for entry in self.entries)

    @property
    def failures(self) -> int:
        return sum(1 for entry in self.entries if not entry.success)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ReportEntry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> ReportEntry:
        return self.entries[index]

    def __str__(self) -> str:
        return "\n".join(self.lines())


class ScriptEngine:
    """
    Interpreter for plans and natural-language commands.

    The engine is the only error boundary. It holds no global state: the
    registry and parser are passed in by whoever builds it.
    """

    def __init__(
        self,
        registry: SkillRegistry,
        parser: Optional[PlanParser] = None,
        config: Optional[EngineConfig] = None,
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.registry = registry
        self.parser = parser or PlanParser()
        self.config = config or EngineConfig()
        self.errors = error_handler or ErrorHandler()
        self._logger = logging.getLogger("megh.core.engine")

    async def run(self, raw: str) -> ExecutionReport:
        """Run one input and return its report."""
        with RunContext() as run_id:
            report = ExecutionReport(run_id=run_id)

            if not raw or not raw.strip():
                self.errors.record(MeghError(ErrorCategory.NO_INPUT, "empty input"))
                report.entries.append(ReportEntry(
                    verb="",
                    text=self.config.no_input_marker,
                    status=EntryStatus.NO_INPUT,
                ))
                log_run_end(run_id, ok=False, commands=0, failures=0)
                return report

            try:
                plan = self.parser.parse(raw)
            except Exception as e:
                error = self.errors.record(
                    MeghError.from_exception(e, category=ErrorCategory.MALFORMED_INPUT)
                )
                report.entries.append(ReportEntry(
                    verb="",
                    text=self.config.error_format.format(error=error.message),
                    status=EntryStatus.MALFORMED,
                ))
                log_run_end(run_id, ok=False, commands=0, failures=1)
                return report

            if len(plan) == 1 and plan[0].verb == self.parser.invalid_plan_verb:
                self.errors.record(MeghError(
                    ErrorCategory.MALFORMED_INPUT, "plan has no usable commands"
                ))
            self._logger.info(f"Running plan with {len(plan)} command(s)")

            for command in plan:
                report.entries.append(await self._execute(command))

            log_run_end(run_id, ok=report.ok, commands=len(plan), failures=report.failures)
            return report

    def run_sync(self, raw: str) -> ExecutionReport:
        """Blocking wrapper around run() for synchronous callers."""
        return asyncio.run(self.run(raw))

    async def _execute(self, command: Command) -> ReportEntry:
        verb = command.verb
        skill = self.registry.resolve(verb)

        if skill is None:
            self.errors.record(MeghError(
                ErrorCategory.UNRESOLVED_VERB, f"no skill for verb '{verb}'", verb=verb
            ))
            return ReportEntry(
                verb=verb,
                text=self.config.no_handler_format.format(verb=verb),
                status=EntryStatus.NO_HANDLER,
            )

        start = time.perf_counter()
        try:
            result = await skill.handle(command)
        except Exception as e:
            error = self.errors.record(MeghError.from_exception(e, verb=verb))
            return ReportEntry(
                verb=verb,
                text=self.config.error_format.format(error=error.message),
                status=EntryStatus.ERROR,
                skill=skill.name,
                execution_time_ms=(time.perf_counter() - start) * 1000,
            )

        elapsed = (time.perf_counter() - start) * 1000
        self._logger.debug(
            f"{skill.name} handled '{verb}' in {elapsed:.1f}ms",
            extra={"verb": verb, "skill": skill.name},
        )
        return ReportEntry(
            verb=verb,
            text=self.config.ok_marker if result is None else str(result),
            status=EntryStatus.OK,
            skill=skill.name,
            execution_time_ms=elapsed,
        )
