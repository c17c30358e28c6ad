"""Serialized sample aggregate schema using pydantic."""

from __future__ import annotations

from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, model_validator

NonNegativeInt = Annotated[StrictInt, Field(ge=0)]

ARRAY_FIELDS = ("time_ns", "before_kb", "after_kb", "allocated_kb")


class SamplesRecord(BaseModel):
    """Flat record produced by ``SampleAggregate.export``."""

    model_config = ConfigDict(extra="ignore")

    capacity: StrictInt = Field(gt=0, description="Maximum number of observations")
    count: StrictInt = Field(ge=0, description="Number of stored observations")
    time_ns: List[NonNegativeInt] = Field(description="Elapsed time per observation (ns)")
    before_kb: List[NonNegativeInt] = Field(description="Memory before each observation (KB)")
    after_kb: List[NonNegativeInt] = Field(description="Memory after each observation (KB)")
    allocated_kb: List[NonNegativeInt] = Field(description="Memory allocated per observation (KB)")
    gc_step: StrictInt = Field(default=-1, description="GC mode: -1 disabled, 0 full, >0 step KB")
    base_kb: StrictInt = Field(default=0, ge=0, description="Baseline memory (KB)")
    cl: float = Field(default=95.0, gt=0, le=100, description="Confidence level (%)")
    rciw: float = Field(default=5.0, gt=0, le=100, description="Target relative CI width (%)")
    name: Optional[str] = Field(default=None, max_length=255, description="Sample set name")
    sum: StrictInt = Field(default=0, description="Sum of time_ns")
    min: Optional[StrictInt] = Field(default=None, description="Minimum time_ns")
    max: Optional[StrictInt] = Field(default=None, description="Maximum time_ns")
    mean: float = Field(default=0.0, description="Running mean of time_ns")
    M2: float = Field(default=0.0, ge=0, description="Sum of squared deviations from the mean")

    @model_validator(mode="after")
    def validate_lengths(self) -> "SamplesRecord":
        """Ensure count fits capacity and every array holds count entries."""
        if self.count > self.capacity:
            raise ValueError(f"count {self.count} exceeds capacity {self.capacity}")
        for field_name in ARRAY_FIELDS:
            n = len(getattr(self, field_name))
            if n != self.count:
                raise ValueError(f"'{field_name}' has {n} entries, expected count={self.count}")
        return self
