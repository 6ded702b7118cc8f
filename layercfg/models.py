from __future__ import annotations

from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class LayerSpec(BaseModel):
    """One INI file contributing a layer to the stack."""
    name: str = Field(min_length=1)
    path: Path
    priority: int = 0
    writable: bool = False
    # missing optional files give an empty layer instead of an error
    required: bool = False


class StackManifest(BaseModel):
    layers: List[LayerSpec] = Field(default_factory=list)

    @field_validator("layers")
    @classmethod
    def _unique_names(cls, layers: List[LayerSpec]) -> List[LayerSpec]:
        seen = set()
        for spec in layers:
            if spec.name in seen:
                raise ValueError(f"duplicate layer name: {spec.name}")
            seen.add(spec.name)
        return layers


class ValueBody(BaseModel):
    value: str


class ValueResult(BaseModel):
    key: str
    value: str


class ActionResult(BaseModel):
    ok: bool
    detail: Optional[str] = None
