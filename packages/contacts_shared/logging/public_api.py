"""Instrumentation for public contacts service methods.

``public_api_instrumented`` turns each call into an :class:`ApiCall` and, once
the method returns or raises, an :class:`ApiResult`. Observers receive both:
one logs, one records OpenTelemetry metrics and one opens a span. Without an
OpenTelemetry SDK installed the metric and span observers are no-ops.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache, wraps
from time import perf_counter
from typing import Any, Callable, Mapping, Protocol, Sequence

from opentelemetry import context as otel_context
from opentelemetry import metrics as otel_metrics
from opentelemetry import trace as otel_trace
from opentelemetry.trace import Status, StatusCode

from packages.contacts_shared.config import PublicApiOtelSettings, load_settings

from . import fields
from .context import log_context


@dataclass(frozen=True)
class ApiCall:
    """Identity of one public method call, taken from its envelope metadata."""

    component_id: str
    api_name: str
    trace_id: str | None = None
    envelope_id: str | None = None
    principal: str | None = None
    references: Mapping[str, str] = field(default_factory=dict)

    def log_fields(self) -> dict[str, object]:
        return {
            fields.COMPONENT_ID: self.component_id,
            fields.API_NAME: self.api_name,
            fields.TRACE_ID: self.trace_id,
            fields.ENVELOPE_ID: self.envelope_id,
            fields.PRINCIPAL: self.principal,
            **self.references,
        }


@dataclass(frozen=True)
class ApiResult:
    """How one call ended; ``errors`` holds ``CODE: message`` strings."""

    call: ApiCall
    success: bool
    duration_ms: float
    errors: list[str] = field(default_factory=list)
    error_categories: list[str] = field(default_factory=list)


class ApiObserver(Protocol):
    """Receives the start and end of every instrumented call.

    Whatever ``start`` returns is handed back to ``finish`` for the same call.
    """

    def start(self, call: ApiCall) -> Any: ...

    def finish(self, result: ApiResult, state: Any) -> None: ...


class LogObserver:
    """Writes one structured line when a call starts and one when it ends."""

    def __init__(self, logger: Any) -> None:
        self._logger = logger

    def start(self, call: ApiCall) -> None:
        event = {fields.EVENT: fields.PUBLIC_API_INVOCATION_EVENT}
        with log_context({**call.log_fields(), **event}):
            self._logger.info("Public API invocation")

    def finish(self, result: ApiResult, state: Any) -> None:
        del state
        with log_context(
            {
                **result.call.log_fields(),
                fields.EVENT: fields.PUBLIC_API_COMPLETION_EVENT,
                fields.SUCCESS: result.success,
                fields.DURATION_MS: result.duration_ms,
                fields.ERRORS: result.errors,
            }
        ):
            level = "info" if result.success else "warning"
            getattr(self._logger, level)("Public API completion")


class _Counter(Protocol):
    def add(self, amount: int | float, attributes: Mapping[str, str]) -> None: ...


class _Histogram(Protocol):
    def record(self, amount: float, attributes: Mapping[str, str]) -> None: ...


class MetricsObserver:
    """Counts calls and failures and records latency when a call ends."""

    def __init__(
        self, *, calls: _Counter, duration_ms: _Histogram, errors: _Counter
    ) -> None:
        self._calls = calls
        self._duration_ms = duration_ms
        self._errors = errors

    def start(self, call: ApiCall) -> None:
        del call

    def finish(self, result: ApiResult, state: Any) -> None:
        del state
        labels = {
            fields.COMPONENT_ID: result.call.component_id,
            fields.API_NAME: result.call.api_name,
        }
        outcome = {fields.OUTCOME: "success" if result.success else "failure"}
        self._calls.add(1, attributes={**labels, **outcome})
        self._duration_ms.record(result.duration_ms, attributes={**labels, **outcome})
        if result.success:
            return
        for category in result.error_categories or ["unknown"]:
            self._errors.add(1, attributes={**labels, fields.ERROR_CATEGORY: category})


class TracingObserver:
    """Runs each call inside its own span, current for the call's duration."""

    def __init__(self, tracer: Any) -> None:
        self._tracer = tracer

    def start(self, call: ApiCall) -> tuple[Any, object]:
        attributes: dict[str, str] = {
            fields.COMPONENT_ID: call.component_id,
            fields.API_NAME: call.api_name,
        }
        if call.trace_id is not None:
            attributes[fields.TRACE_ID] = call.trace_id
        attributes.update({f"reference.{k}": v for k, v in call.references.items()})
        span = self._tracer.start_span(
            f"public_api.{call.component_id}.{call.api_name}", attributes=attributes
        )
        token = otel_context.attach(otel_trace.set_span_in_context(span))
        return span, token

    def finish(self, result: ApiResult, state: Any) -> None:
        if state is None:
            return
        span, token = state
        try:
            span.set_attribute(fields.SUCCESS, result.success)
            span.set_attribute(fields.DURATION_MS, result.duration_ms)
            if not result.success:
                summary = "; ".join(result.errors[:3])
                span.set_status(Status(StatusCode.ERROR, summary))
            span.end()
        finally:
            otel_context.detach(token)


def public_api_instrumented(
    *,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
    observers: Sequence[ApiObserver] | None = None,
    logger: Any | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Instrument one public method taking a keyword ``meta`` envelope.

    ``id_fields`` names keyword arguments copied onto the call as references.
    Observers default to process-wide OpenTelemetry tracing and metrics; a
    ``logger`` adds a :class:`LogObserver` ahead of them and also receives
    observer failures, which never reach the caller.
    """
    chain: list[ApiObserver] = [] if logger is None else [LogObserver(logger)]
    if observers is None:
        chain.extend((_process_tracing(), _process_metrics()))
    else:
        chain.extend(observers)
    if not chain:
        raise ValueError("public_api_instrumented requires at least one observer")

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        name = api_name or func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            call = _call_from_kwargs(component_id, name, id_fields, kwargs)
            states = [_guarded(logger, o, "start", o.start, call) for o in chain]
            started = perf_counter()
            try:
                outcome = func(*args, **kwargs)
            except Exception as exc:
                result = ApiResult(
                    call=call,
                    success=False,
                    duration_ms=_elapsed_ms(started),
                    errors=[f"{type(exc).__name__}: {exc}"],
                    error_categories=["internal"],
                )
                _finish_all(logger, chain, states, result)
                raise
            _finish_all(logger, chain, states, _result_of(call, outcome, started))
            return outcome

        return wrapper

    return decorator


def _call_from_kwargs(
    component_id: str,
    api_name: str,
    id_fields: tuple[str, ...],
    kwargs: Mapping[str, Any],
) -> ApiCall:
    meta = kwargs.get("meta")
    return ApiCall(
        component_id=component_id,
        api_name=api_name,
        trace_id=getattr(meta, "trace_id", None) or None,
        envelope_id=getattr(meta, "envelope_id", None) or None,
        principal=getattr(meta, "principal", None) or None,
        references={
            key: str(kwargs[key])
            for key in id_fields
            if kwargs.get(key) not in (None, "")
        },
    )


def _result_of(call: ApiCall, outcome: object, started: float) -> ApiResult:
    """Read envelope errors off a returned value; anything else is a success."""
    reported = getattr(outcome, "errors", None) or []
    errors = [item for item in reported if hasattr(item, "category")]
    return ApiResult(
        call=call,
        success=not errors,
        duration_ms=_elapsed_ms(started),
        errors=[f"{item.code}: {item.message}" for item in errors],
        error_categories=[
            getattr(item.category, "value", str(item.category)) for item in errors
        ],
    )


def _finish_all(
    logger: Any | None,
    chain: Sequence[ApiObserver],
    states: Sequence[Any],
    result: ApiResult,
) -> None:
    # Reverse order so spans opened first close last.
    for observer, state in reversed(list(zip(chain, states))):
        _guarded(logger, observer, "finish", observer.finish, result, state)


def _guarded(
    logger: Any | None,
    observer: object,
    stage: str,
    hook: Callable[..., Any],
    *args: Any,
) -> Any:
    try:
        return hook(*args)
    except Exception as exc:  # noqa: BLE001
        if logger is not None:
            logger.warning(
                "Public API observer failed: observer=%s stage=%s error=%s",
                type(observer).__name__,
                stage,
                f"{type(exc).__name__}: {exc}",
            )
        return None


def _elapsed_ms(started: float) -> float:
    return round((perf_counter() - started) * 1000.0, 3)


@lru_cache(maxsize=1)
def _otel_names() -> PublicApiOtelSettings:
    return load_settings().observability.public_api_otel


@lru_cache(maxsize=1)
def _process_tracing() -> TracingObserver:
    return TracingObserver(otel_trace.get_tracer(_otel_names().tracer_name))


@lru_cache(maxsize=1)
def _process_metrics() -> MetricsObserver:
    names = _otel_names()
    meter = otel_metrics.get_meter(names.meter_name)
    return MetricsObserver(
        calls=meter.create_counter(
            name=names.metric_public_api_calls_total,
            description="Public contacts API calls by method and outcome.",
            unit="1",
        ),
        duration_ms=meter.create_histogram(
            name=names.metric_public_api_duration_ms,
            description="Public contacts API latency.",
            unit="ms",
        ),
        errors=meter.create_counter(
            name=names.metric_public_api_errors_total,
            description="Failed public contacts API calls by error category.",
            unit="1",
        ),
    )
