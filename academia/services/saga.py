import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from academia.core.errors import AcademiaError, BackendError

logger = logging.getLogger("academia.saga")

DONE = "done"
FAILED = "failed"
COMPENSATED = "compensated"
SKIPPED = "skipped"


@dataclass
class SagaStep:
    name: str
    action: Callable[[], Any]
    compensate: Optional[Callable[[], Any]] = None
    required: bool = True


@dataclass
class StepOutcome:
    name: str
    status: str
    required: bool
    error: Optional[str] = None


@dataclass
class SagaReport:
    saga: str
    steps: list[StepOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return all(step.status == DONE for step in self.steps if step.required)

    @property
    def failed_steps(self) -> list[str]:
        return [step.name for step in self.steps if step.status == FAILED]

    def outcome(self, name: str) -> Optional[StepOutcome]:
        for step in self.steps:
            if step.name == name:
                return step
        return None

    def as_dict(self) -> dict:
        return {
            "saga": self.saga,
            "sucesso": self.succeeded,
            "etapas": [
                {"etapa": s.name, "status": s.status, "obrigatoria": s.required, "erro": s.error}
                for s in self.steps
            ],
        }


class SagaFailed(BackendError):
    def __init__(self, report: SagaReport, cause: Exception) -> None:
        self.report = report
        self.cause = cause
        kind = cause.kind if isinstance(cause, BackendError) else "internal"
        message = cause.message if isinstance(cause, AcademiaError) else str(cause)
        super().__init__(kind, message, detail=report.as_dict())
        if isinstance(cause, AcademiaError):
            self.status_code = cause.status_code
            self.code = cause.code


class Saga:
    """Ordered writes across independent documents.

    A required step that fails compensates every completed step in reverse
    order and raises ``SagaFailed``. An optional step that fails is logged and
    the saga carries on. Nothing is retried automatically; ``retry`` re-runs
    the failed optional steps of a previous report on demand.
    """

    def __init__(self, name: str, steps: Optional[list[SagaStep]] = None) -> None:
        self.name = name
        self.steps: list[SagaStep] = list(steps or [])

    def add_step(
        self,
        name: str,
        action: Callable[[], Any],
        compensate: Optional[Callable[[], Any]] = None,
        required: bool = True,
    ) -> "Saga":
        self.steps.append(SagaStep(name, action, compensate, required))
        return self

    def run(self) -> SagaReport:
        report = SagaReport(self.name)
        completed: list[tuple[SagaStep, StepOutcome]] = []
        for index, step in enumerate(self.steps):
            try:
                step.action()
            except Exception as exc:
                outcome = StepOutcome(step.name, FAILED, step.required, _describe(exc))
                report.steps.append(outcome)
                if not step.required:
                    logger.warning("saga=%s step=%s failed, continuing: %s", self.name, step.name, exc)
                    continue
                logger.error("saga=%s step=%s failed: %s", self.name, step.name, exc)
                self._compensate(completed)
                report.steps.extend(
                    StepOutcome(pending.name, SKIPPED, pending.required) for pending in self.steps[index + 1:]
                )
                raise SagaFailed(report, exc) from exc
            outcome = StepOutcome(step.name, DONE, step.required)
            report.steps.append(outcome)
            completed.append((step, outcome))
        return report

    def retry(self, report: SagaReport) -> SagaReport:
        failed = {s.name for s in report.steps if s.status == FAILED and not s.required}
        for step in self.steps:
            if step.name not in failed:
                continue
            outcome = report.outcome(step.name)
            try:
                step.action()
            except Exception as exc:
                logger.warning("saga=%s step=%s retry failed: %s", self.name, step.name, exc)
                outcome.error = _describe(exc)
                continue
            outcome.status = DONE
            outcome.error = None
        return report

    def _compensate(self, completed: list[tuple[SagaStep, StepOutcome]]) -> None:
        for step, outcome in reversed(completed):
            if step.compensate is None:
                continue
            try:
                step.compensate()
            except Exception as exc:
                logger.error("saga=%s compensation of %s failed: %s", self.name, step.name, exc)
                outcome.error = f"compensacao falhou: {_describe(exc)}"
                continue
            outcome.status = COMPENSATED


def _describe(exc: Exception) -> str:
    if isinstance(exc, AcademiaError):
        return exc.message
    return str(exc) or exc.__class__.__name__
