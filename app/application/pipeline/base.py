from __future__ import annotations

from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    List,
    Optional,
    Protocol,
    runtime_checkable,
    Mapping,
    ClassVar,
)
import logging
from abc import ABC, abstractmethod
from time import perf_counter
from enum import Enum
import uuid


@dataclass(slots=True)
class PipelineContext:
    """Per-request state shared across the image fetch steps.

    - input: request payload (query, client id); never mutated by steps
    - artifacts: values produced by one step for the next (search URL,
      extracted image ref, payload) plus reserved keys such as the request id
    """

    REQUEST_ID_KEY: ClassVar[str] = "_request_id"

    input: Mapping[str, Any]
    artifacts: Dict[str, Any] = field(default_factory=dict)

    def set(self, key: str, value: Any) -> None:
        self.artifacts[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self.artifacts.get(key, default)

    def has(self, key: str) -> bool:
        return key in self.artifacts

    def require(self, keys: List[str]) -> None:
        missing = [k for k in keys if k not in self.artifacts]
        if missing:
            raise KeyError(f"Missing required context keys: {', '.join(missing)}")

    # ----- Request ID (stored in artifacts) -----
    def get_request_id(self) -> Optional[str]:
        return self.get(self.REQUEST_ID_KEY, None)

    def ensure_request_id(self) -> str:
        rid = self.get_request_id()
        if not rid:
            rid = uuid.uuid4().hex[:12]
            self.set(self.REQUEST_ID_KEY, rid)
        return rid

    @property
    def client_id(self) -> str:
        return str(self.input.get("client_id") or "unknown")


class StepStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@runtime_checkable
class Step(Protocol):
    async def __call__(
        self, context: PipelineContext
    ) -> None:  # pragma: no cover - protocol
        ...


logger = logging.getLogger(__name__)


class BaseStep(ABC):
    """Base class for pipeline steps with required inputs, status and timing hooks.

    Each step runs exactly once per request; waiting and polling belong to the
    step itself (selector timeouts, the viewer extractor's attempts).
    """

    name: str = "base_step"

    required_keys: List[str] = []

    # runtime fields
    status: StepStatus = StepStatus.PENDING
    last_error: Optional[Exception] = None
    duration: float = 0.0

    async def __call__(self, context: PipelineContext) -> None:
        self.last_error = None

        if not self.validate_inputs(context):
            missing = [k for k in self.required_keys if not context.has(k)]
            raise KeyError(
                f"Missing required inputs for step '{self.name}': {', '.join(missing)}"
            )

        self.status = StepStatus.RUNNING
        self.on_start(context)
        start = perf_counter()
        try:
            await self.run(context)
            self.status = StepStatus.COMPLETED
        except Exception as e:  # noqa: BLE001
            self.last_error = e
            self.status = StepStatus.FAILED
            raise
        finally:
            self.duration = perf_counter() - start
            self.on_finish(context, self.duration)

    @abstractmethod
    async def run(
        self, context: PipelineContext
    ) -> None:  # pragma: no cover - abstract
        ...

    # Hooks
    def on_start(self, context: PipelineContext) -> None:
        logger.debug("Step %s start", getattr(self, "name", self.__class__.__name__))

    def on_finish(self, context: PipelineContext, duration: float) -> None:
        logger.info(
            "Step %s finished in %.3fs with status=%s request_id=%s",
            getattr(self, "name", self.__class__.__name__),
            duration,
            self.status.value,
            context.get_request_id(),
        )

    # Utilities
    def validate_inputs(self, context: PipelineContext) -> bool:
        if not self.required_keys:
            return True
        return all(context.has(k) for k in self.required_keys)


from typing import TypedDict


class StepResult(TypedDict):  # pragma: no cover - typing helper
    name: str
    status: str
    duration: float
    error: Optional[str]


class PipelineResult(TypedDict):  # pragma: no cover - typing helper
    duration: float
    steps: List[StepResult]
    context: PipelineContext


class Pipeline:
    """Runs steps in order; the first failing step's exception propagates."""

    def __init__(self, steps: List[Step]):
        self._steps = steps

    @property
    def step_names(self) -> List[str]:
        return [getattr(s, "name", s.__class__.__name__) for s in self._steps]

    async def execute(self, context: PipelineContext) -> PipelineResult:
        context.ensure_request_id()

        pipeline_start = perf_counter()
        steps: List[StepResult] = []

        for step in self._steps:
            step_info: Dict[str, Any] = {
                "name": getattr(step, "name", step.__class__.__name__),
                "status": StepStatus.PENDING.value,
                "duration": 0.0,
                "error": None,
            }
            steps.append(step_info)  # type: ignore[arg-type]

            step_start = perf_counter()
            try:
                await step(context)
                step_info["status"] = StepStatus.COMPLETED.value
            except Exception as e:  # noqa: BLE001
                step_info["status"] = StepStatus.FAILED.value
                step_info["error"] = str(e)
                raise
            finally:
                step_info["duration"] = perf_counter() - step_start

        return {
            "duration": perf_counter() - pipeline_start,
            "steps": steps,
            "context": context,
        }


def format_step_timings(result: PipelineResult) -> str:
    """Render step durations as ``name=0.123s`` pairs for a single log line."""
    return " ".join(f"{s['name']}={s['duration']:.3f}s" for s in result["steps"])


class Middleware(Protocol):  # pragma: no cover - optional extension point
    def __call__(self, step: Step) -> Step: ...


def make_logging_middleware(
    logger_obj: logging.Logger | None = None,
    level_before: int = logging.DEBUG,
    level_after: int = logging.INFO,
) -> Middleware:
    """Return a middleware that logs before and after each step execution.

    Logs include: step name, request id, client, status, duration.
    """
    _log = logger_obj or logger

    def _middleware(step: Step) -> Step:
        class _Wrapped:
            def __init__(self, inner: Step):
                self._inner = inner

            def __getattr__(self, item):  # delegate attributes like 'name'
                return getattr(self._inner, item)

            async def __call__(self, context: PipelineContext) -> None:
                step_name = getattr(self._inner, "name", self._inner.__class__.__name__)
                rid = context.get_request_id()
                _log.log(
                    level_before,
                    "[request_id=%s client=%s] Step %s BEGIN",
                    rid,
                    context.client_id,
                    step_name,
                )
                _start = perf_counter()
                status = StepStatus.FAILED
                try:
                    await self._inner(context)
                    status = StepStatus.COMPLETED
                finally:
                    _log.log(
                        level_after,
                        "[request_id=%s client=%s] Step %s END status=%s duration=%.3fs",
                        rid,
                        context.client_id,
                        step_name,
                        status.value,
                        perf_counter() - _start,
                    )

        return _Wrapped(step)

    return _middleware
