"""
Utility functions for ferrocore

Logging setup, performance measurement for lazy pipelines, and a runner for
pipelines described as a list of PipelineStep models.
"""

import gc
import logging
import sys
import time
import tracemalloc
from typing import Any, Callable, Iterable, List, Tuple

from ferrocore.lazy import Iter
from ferrocore.models import (
    OperationType,
    PerformanceInfo,
    PerformanceSummary,
    PipelineReport,
    PipelineStep,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s'

# Global performance tracking
_performance_metrics = {
    "operations": [],
    "total_time_ms": 0.0,
    "total_memory_mb": 0.0,
    "operation_count": 0
}


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Setup structured logging to stdout for scripts using ferrocore"""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    return logging.getLogger('ferrocore')


def _record(info: PerformanceInfo) -> None:
    _performance_metrics["operations"].append(info)
    _performance_metrics["total_time_ms"] += info.execution_time_ms
    _performance_metrics["total_memory_mb"] += info.memory_usage_mb
    _performance_metrics["operation_count"] += 1


def _measure(operation_name: str, func: Callable, *args, **kwargs) -> Tuple[Any, PerformanceInfo]:
    """Run func under timing and tracemalloc; record the outcome either way"""
    was_tracing = tracemalloc.is_tracing()
    if was_tracing:
        tracemalloc.reset_peak()
    else:
        tracemalloc.start()
    gc.collect()
    start_time = time.perf_counter()

    try:
        result = func(*args, **kwargs)
        execution_time_ms = (time.perf_counter() - start_time) * 1000
        _, peak = tracemalloc.get_traced_memory()

        info = PerformanceInfo(
            operation=operation_name,
            execution_time_ms=execution_time_ms,
            memory_usage_mb=peak / 1024 / 1024,
            success=True,
            result_size=len(result) if hasattr(result, "__len__") else None,
            timestamp=time.time()
        )
        _record(info)
        logger.debug(f"{operation_name} finished in {execution_time_ms:.3f}ms")
        return result, info

    except Exception as e:
        execution_time_ms = (time.perf_counter() - start_time) * 1000
        _, peak = tracemalloc.get_traced_memory()

        _record(PerformanceInfo(
            operation=operation_name,
            execution_time_ms=execution_time_ms,
            memory_usage_mb=peak / 1024 / 1024,
            success=False,
            error=str(e),
            timestamp=time.time()
        ))
        logger.error(f"{operation_name} failed after {execution_time_ms:.3f}ms: {e}")
        raise

    finally:
        if not was_tracing:
            tracemalloc.stop()


def measure_performance(operation_name: str, func: Callable, *args, **kwargs) -> PerformanceInfo:
    """Measure performance of a function call with memory tracking"""
    _, info = _measure(operation_name, func, *args, **kwargs)
    return info


def get_performance_summary() -> PerformanceSummary:
    """Get summary of all performance metrics"""
    count = _performance_metrics["operation_count"]
    if count == 0:
        return PerformanceSummary()

    return PerformanceSummary(
        total_operations=count,
        total_time_ms=_performance_metrics["total_time_ms"],
        total_memory_mb=_performance_metrics["total_memory_mb"],
        avg_time_ms=_performance_metrics["total_time_ms"] / count,
        avg_memory_mb=_performance_metrics["total_memory_mb"] / count
    )


def get_recorded_operations() -> List[PerformanceInfo]:
    return list(_performance_metrics["operations"])


def clear_performance_metrics():
    """Clear all performance metrics"""
    global _performance_metrics
    _performance_metrics = {
        "operations": [],
        "total_time_ms": 0.0,
        "total_memory_mb": 0.0,
        "operation_count": 0
    }


def validate_lazy_evaluation(pipeline: Any) -> bool:
    """True when pipeline is an Iter and nothing in its chain has pulled from a source"""
    if not isinstance(pipeline, Iter):
        return False
    return not pipeline.has_pulled()


def build_pipeline(source: Iterable[Any], steps: List[PipelineStep]) -> Iter:
    """Apply declarative steps to a source, without pulling anything"""
    pipeline = Iter.from_iterable(source)

    for step in steps:
        op_type = step.type

        if op_type == OperationType.MAP:
            pipeline = pipeline.map(step.function)
        elif op_type == OperationType.FILTER:
            pipeline = pipeline.filter(step.function)
        elif op_type == OperationType.FILTER_MAP:
            pipeline = pipeline.filter_map(step.function)
        elif op_type == OperationType.FLAT_MAP:
            pipeline = pipeline.flat_map(step.function)
        elif op_type == OperationType.INSPECT:
            pipeline = pipeline.inspect(step.function)
        elif op_type == OperationType.TAKE:
            pipeline = pipeline.take(step.count)
        elif op_type == OperationType.SKIP:
            pipeline = pipeline.skip(step.count)
        elif op_type == OperationType.CHUNK:
            pipeline = pipeline.chunk(step.size)
        elif op_type == OperationType.ENUMERATE:
            pipeline = pipeline.enumerate()
        else:
            raise ValueError(f"Unknown op: {op_type}")

        logger.debug(f"Applied step {op_type.value}")

    return pipeline


def process_lazy_operations(source: Iterable[Any], steps: List[PipelineStep]) -> PipelineReport:
    """Build a pipeline from steps, collect it, and report timing and memory"""
    pipeline = build_pipeline(source, steps)
    operations_applied = [step.type.value for step in steps]

    result, info = _measure("lazy_chain", pipeline.collect)
    logger.info(
        f"Ran {len(operations_applied)} step(s) -> {len(result)} item(s) "
        f"in {info.execution_time_ms:.2f}ms"
    )

    return PipelineReport(
        result=result,
        operations_applied=operations_applied,
        performance=info
    )
