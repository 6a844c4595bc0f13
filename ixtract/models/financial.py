from typing import Dict, List, Optional, Literal

from pydantic import BaseModel, Field, ConfigDict, computed_field

PeriodType = Literal["instant", "duration", "unknown"]
Consolidation = Literal["consolidated", "non_consolidated", "unknown"]
FiscalYear = Literal["current", "previous", "unknown"]
UnitKind = Literal["simple", "fraction"]
TableType = Literal[
    "balance_sheet", "income_statement", "cash_flow", "shareholder", "unknown"
]


# -----------------------------
# Dictionaries
# -----------------------------
class Context(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    period_type: PeriodType = "unknown"
    instant: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    entity: Optional[str] = None
    scheme: Optional[str] = None
    segment: Dict[str, str] = Field(default_factory=dict)
    consolidation: Consolidation = "unknown"
    fiscal_year: FiscalYear = "unknown"
    synthesized: bool = False

    @computed_field
    @property
    def is_current_period(self) -> bool:
        return self.fiscal_year == "current"

    @computed_field
    @property
    def is_previous_period(self) -> bool:
        return self.fiscal_year == "previous"

    @property
    def period_end(self) -> Optional[str]:
        return self.instant or self.end_date


class Unit(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    measure: str = ""
    symbol: str = ""
    label: str = ""
    kind: UnitKind = "simple"
    numerator: Optional[str] = None
    denominator: Optional[str] = None


# -----------------------------
# Tables
# -----------------------------
class TaggedElement(BaseModel):
    """Structured-data attributes read off one element."""

    concept: Optional[str] = None
    context_ref: Optional[str] = None
    unit_ref: Optional[str] = None
    decimals: Optional[str] = None
    scale: Optional[str] = None
    format: Optional[str] = None
    sign: Optional[str] = None
    context: Optional[Context] = None
    unit: Optional[Unit] = None


class Cell(BaseModel):
    value: str = ""
    tag: Optional[TaggedElement] = None
    indent: int = 0

    @computed_field
    @property
    def is_tagged(self) -> bool:
        return self.tag is not None


class TableStatistics(BaseModel):
    row_count: int = 0
    column_count: int = 0
    empty_cells: int = 0
    total_cells: int = 0
    tag_count: int = 0
    concepts: List[str] = Field(default_factory=list)


class TableModel(BaseModel):
    id: str
    headers: List[Cell] = Field(default_factory=list)
    rows: List[List[Cell]] = Field(default_factory=list)
    table_type: TableType = "unknown"
    title: str = ""
    source: str = ""
    statistics: TableStatistics = Field(default_factory=TableStatistics)
    fallback: bool = False
    score: int = 0

    def header_labels(self) -> List[str]:
        return [c.value for c in self.headers]

    def as_text_rows(self) -> List[List[str]]:
        return [[c.value for c in row] for row in self.rows]


# -----------------------------
# Hierarchy
# -----------------------------
class HierarchicalItem(BaseModel):
    name: str
    path: List[str] = Field(default_factory=list)
    level: int = 0
    previous: Optional[float] = None
    current: Optional[float] = None
    change: Optional[float] = None
    change_rate: Optional[float] = None
    is_total: bool = False
    is_calculated: bool = False
    children: List["HierarchicalItem"] = Field(default_factory=list)
    context_ref: Optional[str] = None
    unit_ref: Optional[str] = None
    concept: Optional[str] = None


class PeriodLabels(BaseModel):
    previous: str = ""
    current: str = ""


class HierarchyMetadata(BaseModel):
    report_type: str = ""
    unit_label: str = ""
    periods: PeriodLabels = Field(default_factory=PeriodLabels)


class HierarchyResult(BaseModel):
    success: bool = True
    data: List[HierarchicalItem] = Field(default_factory=list)
    metadata: HierarchyMetadata = Field(default_factory=HierarchyMetadata)
    errors: List[str] = Field(default_factory=list)


# -----------------------------
# Comments
# -----------------------------
class CommentSection(BaseModel):
    id: str
    title: str
    content: str = ""
    related_items: List[str] = Field(default_factory=list)


# -----------------------------
# Pipeline output
# -----------------------------
class Diagnostics(BaseModel):
    document_type: str = "unknown"
    element_count: int = 0
    context_count: int = 0
    unit_count: int = 0
    table_count: int = 0
    mapped_tables: int = 0
    used_fallback: bool = False
    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class ExtractionResult(BaseModel):
    contexts: Dict[str, Context] = Field(default_factory=dict)
    units: Dict[str, Unit] = Field(default_factory=dict)
    tables: List[TableModel] = Field(default_factory=list)
    diagnostics: Diagnostics = Field(default_factory=Diagnostics)

    @property
    def success(self) -> bool:
        return not self.diagnostics.errors
