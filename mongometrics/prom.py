"""Small in-process metric primitives with Prometheus text exposition."""

from __future__ import annotations

import math
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterable

COMMON_NAMESPACE = "mongodb"
MONGOD_NAMESPACE = "mongodb_mongod"

DEFAULT_OBJECTIVES = (0.5, 0.9, 0.99)
DEFAULT_MAX_AGE = 600.0


def build_fqname(namespace: str, subsystem: str, name: str) -> str:
    """Join the non-empty parts of a metric name with underscores."""
    if not name:
        return ""
    return "_".join(part for part in (namespace, subsystem, name) if part)


@dataclass(frozen=True)
class Desc:
    """Static description of a metric family."""

    fqname: str
    help: str
    label_names: tuple[str, ...] = ()
    kind: str = "untyped"


@dataclass
class Sample:
    """A single exposed value with its labels."""

    name: str
    labels: dict[str, str]
    value: float
    desc: Desc | None = None


class _Metric:
    kind = "untyped"

    def __init__(self, name: str, help: str, *, namespace: str = "", subsystem: str = "", **options):
        fqname = build_fqname(namespace, subsystem, name)
        if not fqname:
            raise ValueError("metric name must not be empty")
        self._setup(Desc(fqname, help, (), self.kind), (), **options)

    @classmethod
    def _bound(cls, desc: Desc, label_values: tuple[str, ...], **options):
        metric = cls.__new__(cls)
        metric._setup(desc, label_values, **options)
        return metric

    def _setup(self, desc: Desc, label_values: tuple[str, ...]) -> None:
        self._desc = desc
        self._label_values = label_values
        self._lock = threading.Lock()

    @property
    def desc(self) -> Desc:
        return self._desc

    def _labels(self, **extra: str) -> dict[str, str]:
        labels = dict(zip(self._desc.label_names, self._label_values))
        labels.update(extra)
        return labels

    def describe(self) -> list[Desc]:
        return [self._desc]


class _ValueMetric(_Metric):
    def _setup(self, desc: Desc, label_values: tuple[str, ...]) -> None:
        super()._setup(desc, label_values)
        self._value = 0.0

    @property
    def value(self) -> float:
        with self._lock:
            return self._value

    def _set(self, value: float) -> None:
        with self._lock:
            self._value = float(value)

    def _add(self, value: float) -> None:
        with self._lock:
            self._value += float(value)

    def _collect(self) -> list[Sample]:
        return [Sample(self._desc.fqname, self._labels(), self.value, self._desc)]


class Gauge(_ValueMetric):
    """A value that can go up and down."""

    kind = "gauge"

    def set(self, value: float) -> None:
        self._set(value)

    def add(self, value: float) -> None:
        self._add(value)

    def collect(self) -> list[Sample]:
        return self._collect()

    def describe(self) -> list[Desc]:
        return [self._desc]


class Counter(_ValueMetric):
    """A cumulative value; it may be set directly but never added to negatively."""

    kind = "counter"

    def set(self, value: float) -> None:
        self._set(value)

    def add(self, value: float) -> None:
        if value < 0:
            raise ValueError("counter cannot decrease in value")
        self._add(value)

    def collect(self) -> list[Sample]:
        return self._collect()

    def describe(self) -> list[Desc]:
        return [self._desc]


def _quantile(sorted_values: list[float], q: float) -> float:
    if not sorted_values:
        return math.nan
    index = max(0, math.ceil(q * len(sorted_values)) - 1)
    return sorted_values[index]


class Summary(_Metric):
    """Tracks count, sum and windowed quantiles of observations."""

    kind = "summary"

    def _setup(
        self,
        desc: Desc,
        label_values: tuple[str, ...],
        objectives: Iterable[float] = DEFAULT_OBJECTIVES,
        max_age: float = DEFAULT_MAX_AGE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super()._setup(desc, label_values)
        self._objectives = tuple(sorted(float(q) for q in objectives))
        if any(not 0.0 < q < 1.0 for q in self._objectives):
            raise ValueError("quantile objectives must lie between 0 and 1")
        if max_age <= 0:
            raise ValueError("max_age must be positive")
        self._max_age = max_age
        self._clock = clock
        self._window: deque[tuple[float, float]] = deque()
        self._count = 0
        self._sum = 0.0

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    @property
    def sum(self) -> float:
        with self._lock:
            return self._sum

    def _prune(self, now: float) -> None:
        while self._window and now - self._window[0][0] > self._max_age:
            self._window.popleft()

    def observe(self, value: float) -> None:
        value = float(value)
        with self._lock:
            now = self._clock()
            self._prune(now)
            self._window.append((now, value))
            self._count += 1
            self._sum += value

    def collect(self) -> list[Sample]:
        with self._lock:
            self._prune(self._clock())
            values = sorted(v for _, v in self._window)
            count, total = self._count, self._sum
        fqname = self._desc.fqname
        samples = [
            Sample(fqname, self._labels(quantile=_format_value(q)), _quantile(values, q), self._desc)
            for q in self._objectives
        ]
        samples.append(Sample(f"{fqname}_sum", self._labels(), total, self._desc))
        samples.append(Sample(f"{fqname}_count", self._labels(), float(count), self._desc))
        return samples

    def describe(self) -> list[Desc]:
        return [self._desc]


class _MetricVec:
    _child_type: type[_Metric] = _Metric

    def __init__(
        self,
        name: str,
        help: str,
        label_names: Iterable[str],
        *,
        namespace: str = "",
        subsystem: str = "",
        **options,
    ):
        fqname = build_fqname(namespace, subsystem, name)
        if not fqname:
            raise ValueError("metric name must not be empty")
        names = tuple(label_names)
        if not names:
            raise ValueError("a metric vector needs at least one label name")
        if len(set(names)) != len(names):
            raise ValueError("duplicate label names")
        self._desc = Desc(fqname, help, names, self._child_type.kind)
        self._options = options
        self._children: dict[tuple[str, ...], _Metric] = {}
        self._lock = threading.Lock()

    @property
    def desc(self) -> Desc:
        return self._desc

    def _resolve(self, args: tuple, kwargs: dict) -> tuple[str, ...]:
        names = self._desc.label_names
        if args and kwargs:
            raise ValueError("pass label values either positionally or by name, not both")
        if kwargs:
            if set(kwargs) != set(names):
                raise ValueError(f"expected labels {sorted(names)}, got {sorted(kwargs)}")
            return tuple(str(kwargs[n]) for n in names)
        if len(args) != len(names):
            raise ValueError(f"expected {len(names)} label values, got {len(args)}")
        return tuple(str(a) for a in args)

    def _child(self, args: tuple, kwargs: dict):
        values = self._resolve(args, kwargs)
        with self._lock:
            child = self._children.get(values)
            if child is None:
                child = self._child_type._bound(self._desc, values, **self._options)
                self._children[values] = child
            return child

    def _reset(self) -> None:
        with self._lock:
            self._children.clear()

    def _collect(self) -> list[Sample]:
        with self._lock:
            children = sorted(self._children.items())
        return [sample for _, child in children for sample in child.collect()]


class GaugeVec(_MetricVec):
    """Gauges partitioned by label values."""

    _child_type = Gauge

    def labels(self, *args, **kwargs) -> Gauge:
        return self._child(args, kwargs)

    def reset(self) -> None:
        self._reset()

    def collect(self) -> list[Sample]:
        return self._collect()

    def describe(self) -> list[Desc]:
        return [self._desc]


class CounterVec(_MetricVec):
    """Counters partitioned by label values."""

    _child_type = Counter

    def labels(self, *args, **kwargs) -> Counter:
        return self._child(args, kwargs)

    def reset(self) -> None:
        self._reset()

    def collect(self) -> list[Sample]:
        return self._collect()

    def describe(self) -> list[Desc]:
        return [self._desc]


class SummaryVec(_MetricVec):
    """Summaries partitioned by label values."""

    _child_type = Summary

    def labels(self, *args, **kwargs) -> Summary:
        return self._child(args, kwargs)

    def reset(self) -> None:
        self._reset()

    def collect(self) -> list[Sample]:
        return self._collect()

    def describe(self) -> list[Desc]:
        return [self._desc]


def _format_value(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


def _escape_label(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def _format_labels(labels: dict[str, str]) -> str:
    if not labels:
        return ""
    body = ",".join(f'{key}="{_escape_label(value)}"' for key, value in labels.items())
    return "{" + body + "}"


def render_text(samples: Iterable[Sample]) -> str:
    """Render samples in the Prometheus text exposition format."""
    lines: list[str] = []
    seen: set[str] = set()
    for sample in samples:
        desc = sample.desc
        if desc is not None and desc.fqname not in seen:
            seen.add(desc.fqname)
            lines.append(f"# HELP {desc.fqname} {_escape_help(desc.help)}")
            lines.append(f"# TYPE {desc.fqname} {desc.kind}")
        lines.append(f"{sample.name}{_format_labels(sample.labels)} {_format_value(sample.value)}")
    return "\n".join(lines) + "\n" if lines else ""