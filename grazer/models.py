from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    # camelCase on the wire, snake_case in Python; either is accepted on input.
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class HalsteadMetrics(_WireModel):
    volume: float = 0.0
    effort: float = 0.0
    difficulty: float = 0.0
    length: int = 0
    vocabulary: int = 0


class MetricsReport(_WireModel):
    """
    Metrics for one file or one directory.

    Files and directories share this shape so a directory is just a fold over
    its children's reports; `kind` tells them apart.
    """

    kind: Literal["file", "directory"] = "file"
    file_name: str
    # Complexity
    cyclomatic_complexity: int = 0
    cognitive_complexity: int = 0
    nesting_depth: int = 0
    # Halstead
    halstead: HalsteadMetrics = Field(default_factory=HalsteadMetrics)
    # Maintainability (0-171, higher is better)
    maintainability_index: float = 0.0
    # Size & readability
    loc: int = 0
    sloc: int = 0
    comment_lines: int = 0
    comment_density: float = 0.0
    character_count: int = 0
    # Architecture
    fan_out: int = 0


class MetricsRequest(BaseModel):
    path: str = Field(..., min_length=1, description="File or directory to measure")
