"""Icon generation models.

Defines the data flowing through one generation request:
- IconRequest / VariantRecord: validated request payload
- MatrixCell / CellResolution: one resolved (theme, state) grid cell
- CreatedNode: canvas handle tagged with its axis identity
- FailureKind / GenerationFailure: closed taxonomy of per-request failures
- GenerationReport: accumulator threaded through grid build and materialization
- GenerationResult: terminal outcome of a request
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, model_validator

from iconmatrix.core.canvas.protocols import CanvasNode
from iconmatrix.core.generation.naming import component_name


class Position(BaseModel):
    """Target coordinates in document space."""

    model_config = ConfigDict(frozen=True)

    x: float = 0
    y: float = 0


class VariantRecord(BaseModel):
    """Pixel payload (or missing marker) for one (theme, state) pair.

    Exactly one of ``data`` and ``is_missing`` holds.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    theme: str
    state: str
    data: bytes | None = Field(default=None, repr=False)
    is_missing: bool = False

    @model_validator(mode="after")
    def _check_payload(self) -> VariantRecord:
        if self.is_missing and self.data is not None:
            raise ValueError(f"Variant {self.theme}/{self.state} has both data and is_missing")
        if not self.is_missing and self.data is None:
            raise ValueError(f"Variant {self.theme}/{self.state} has neither data nor is_missing")
        return self


class IconRequest(BaseModel):
    """One icon to generate.

    Attributes:
        category: Icon category (first name segment)
        name: Icon name (second name segment)
        icon_width: Leaf node width in pixels
        icon_height: Leaf node height in pixels
        themes: Theme axis labels, any order
        states: State axis labels, any order
        variants: Variant payloads; first match wins per (theme, state)
        position: Where to place the produced asset
        has_problems: Upstream problem flag supplied by the caller
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    category: str
    name: str
    icon_width: PositiveInt
    icon_height: PositiveInt
    themes: tuple[str, ...] = ()
    states: tuple[str, ...] = ()
    variants: tuple[VariantRecord, ...] = ()
    position: Position = Field(default_factory=Position)
    has_problems: bool = False

    @property
    def component_name(self) -> str:
        return component_name(self.category, self.name, self.icon_width, self.icon_height)


class CellResolution(str, Enum):
    """How a grid cell was resolved against the request's variants."""

    FOUND = "found"
    MISSING = "missing"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class MatrixCell:
    """One (theme, state) cell of the variant grid."""

    theme_index: int
    state_index: int
    theme: str
    state: str
    resolution: CellResolution
    record: VariantRecord | None = None


@dataclass
class CreatedNode:
    """A materialized leaf node and the grid cell it came from."""

    node: CanvasNode
    theme: str
    state: str
    theme_index: int
    state_index: int


class FailureKind(str, Enum):
    """Closed set of generation failures."""

    CELL_UNRESOLVED = "cell_unresolved"
    MATERIALIZATION_FAILED = "materialization_failed"
    ASSEMBLY_FAILED = "assembly_failed"
    ZERO_YIELD = "zero_yield"


class GenerationFailure(BaseModel):
    """A failure recorded during generation, with its context."""

    model_config = ConfigDict(frozen=True)

    kind: FailureKind
    message: str
    theme: str | None = None
    state: str | None = None
    error_type: str | None = None

    @property
    def descriptor(self) -> str:
        if self.error_type:
            return f"{self.message} ({self.error_type})"
        return self.message


@dataclass
class GenerationReport:
    """Problem accumulator for one request.

    Missing placeholders do not count as failures but still raise the
    problem flag.
    """

    upstream_problems: bool = False
    failures: list[GenerationFailure] = field(default_factory=list)
    missing_count: int = 0

    def record(self, failure: GenerationFailure) -> None:
        self.failures.append(failure)

    def mark_missing(self) -> None:
        self.missing_count += 1

    def failures_of(self, kind: FailureKind) -> list[GenerationFailure]:
        return [failure for failure in self.failures if failure.kind is kind]

    @property
    def has_problems(self) -> bool:
        return self.upstream_problems or self.missing_count > 0 or bool(self.failures)


class AssemblyMode(str, Enum):
    """Which terminal path a request took."""

    SKIPPED = "skipped"
    ZERO_YIELD = "zero_yield"
    SINGLE = "single"
    GROUPED = "grouped"
    FALLBACK = "fallback"


class GenerationResult(BaseModel):
    """Terminal outcome of one request.

    Attributes:
        component_name: Canonical name of the requested asset
        width: Width of the produced geometry (0 when nothing was produced)
        height: Height of the produced geometry
        mode: Path taken (skipped, zero_yield, single, grouped, fallback)
        has_problems: Aggregate problem flag (upstream or local)
        indexed: Whether the canonical name was recorded for deduplication
        node_count: Number of leaf nodes materialized
        failures: Failures recorded along the way
    """

    model_config = ConfigDict(frozen=True)

    component_name: str
    width: float = 0
    height: float = 0
    mode: AssemblyMode
    has_problems: bool = False
    indexed: bool = False
    node_count: int = 0
    failures: tuple[GenerationFailure, ...] = ()

    @property
    def skipped(self) -> bool:
        return self.mode is AssemblyMode.SKIPPED
