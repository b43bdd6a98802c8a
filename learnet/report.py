"""Reports produced when a pipeline network is trained."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class NetworkReport(BaseModel):
    """Outcome of one training call on a pipeline's learning network."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    capability: str = Field(..., description="Capability category of the pipeline")
    components: Dict[str, Any] = Field(
        default_factory=dict,
        description="Report of each trained component, keyed by component name",
    )
    trained: List[str] = Field(
        default_factory=list,
        description="Components (re)trained during this call, in training order",
    )
    anonymized: bool = Field(
        default=False,
        description="Whether training data was dropped from the network afterwards",
    )
