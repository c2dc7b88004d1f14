"""
Pydantic Models

Declarative pipeline steps and performance reports used by ferrocore.utils.
"""

from typing import Any, Callable, List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator
from enum import Enum


class OperationType(str, Enum):
    """Pipeline operations that can be described declaratively"""
    MAP = "map"
    FILTER = "filter"
    FILTER_MAP = "filter_map"
    FLAT_MAP = "flat_map"
    INSPECT = "inspect"
    TAKE = "take"
    SKIP = "skip"
    CHUNK = "chunk"
    ENUMERATE = "enumerate"


CALLABLE_OPERATIONS = {
    OperationType.MAP,
    OperationType.FILTER,
    OperationType.FILTER_MAP,
    OperationType.FLAT_MAP,
    OperationType.INSPECT,
}

COUNTED_OPERATIONS = {OperationType.TAKE, OperationType.SKIP}


class PipelineStep(BaseModel):
    """A single stage to apply to an Iter"""
    type: OperationType = Field(
        ...,
        description="Operation to apply"
    )
    function: Optional[Callable[..., Any]] = Field(
        None,
        description="Function or predicate for map/filter-style operations"
    )
    count: Optional[int] = Field(
        None,
        description="Element count for take/skip",
        ge=0
    )
    size: Optional[int] = Field(
        None,
        description="Chunk size for chunk",
        ge=1
    )

    @model_validator(mode="after")
    def validate_arguments(self):
        """Make sure each operation carries the argument it needs"""
        if self.type in CALLABLE_OPERATIONS and self.function is None:
            raise ValueError(f"'{self.type.value}' step requires a function")
        if self.type in COUNTED_OPERATIONS and self.count is None:
            raise ValueError(f"'{self.type.value}' step requires a count")
        if self.type == OperationType.CHUNK and self.size is None:
            raise ValueError("'chunk' step requires a size")
        return self


class PerformanceInfo(BaseModel):
    """Timing and memory for one measured operation"""
    operation: str = Field(..., description="Name of the measured operation")
    execution_time_ms: float = Field(..., description="Wall time in milliseconds", ge=0.0)
    memory_usage_mb: float = Field(..., description="Peak traced memory in MB", ge=0.0)
    success: bool = Field(..., description="Whether the operation completed")
    result_size: Optional[int] = Field(None, description="len() of the result, when it has one")
    error: Optional[str] = Field(None, description="Error message when the operation failed")
    timestamp: float = Field(..., description="Unix time the measurement finished")


class PerformanceSummary(BaseModel):
    """Aggregate of all recorded measurements"""
    total_operations: int = Field(0, ge=0)
    total_time_ms: float = Field(0.0, ge=0.0)
    total_memory_mb: float = Field(0.0, ge=0.0)
    avg_time_ms: float = Field(0.0, ge=0.0)
    avg_memory_mb: float = Field(0.0, ge=0.0)


class PipelineReport(BaseModel):
    """Outcome of running a declarative pipeline"""
    result: List[Any] = Field(default_factory=list)
    operations_applied: List[str] = Field(default_factory=list)
    performance: PerformanceInfo

    @field_validator("operations_applied")
    @classmethod
    def validate_operations(cls, v):
        """Only known operation names may be reported"""
        valid = {op.value for op in OperationType}
        unknown = [op for op in v if op not in valid]
        if unknown:
            raise ValueError(f"Unknown operations: {unknown}. Valid operations: {sorted(valid)}")
        return v
