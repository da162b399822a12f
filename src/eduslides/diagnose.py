"""
Diagnostics

Checks for problems the data structures do not prevent on their own:
catalogue layouts with overlapping or out-of-grid slots, block types whose
factories produce the wrong content, and slides whose block count does not
match their layout.
"""

import sys
from dataclasses import dataclass, field
from enum import Enum
from itertools import combinations
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from .layouts import GRID_COLUMNS, GRID_ROWS, LAYOUT_CATALOGUE, LayoutDefinition
from .models import BlockBase, Slide, SlideLayout
from .registry import BlockTypeRegistry
from .slides import check_layout_fit


class Severity(str, Enum):
    """Severity of a diagnostic issue."""
    error = "error"
    warning = "warning"
    info = "info"


@dataclass
class DiagnosticIssue:
    """A single diagnostic finding."""
    code: str
    severity: Severity
    message: str
    subject: Optional[str] = None  # layout id, block type or slide id
    category: str = ""
    detail: str = ""


@dataclass
class DiagnosticReport:
    """Aggregated diagnostic results."""
    issues: List[DiagnosticIssue] = field(default_factory=list)
    layout_count: int = 0
    block_type_count: int = 0
    slide_count: int = 0

    @property
    def errors(self) -> List[DiagnosticIssue]:
        return [i for i in self.issues if i.severity == Severity.error]

    @property
    def warnings(self) -> List[DiagnosticIssue]:
        return [i for i in self.issues if i.severity == Severity.warning]

    @property
    def has_blocking_issues(self) -> bool:
        return len(self.errors) > 0

    def merge(self, other: "DiagnosticReport") -> "DiagnosticReport":
        """Combine two reports into a new one."""
        return DiagnosticReport(
            issues=self.issues + other.issues,
            layout_count=self.layout_count + other.layout_count,
            block_type_count=self.block_type_count + other.block_type_count,
            slide_count=self.slide_count + other.slide_count,
        )

    def print_report(self, file=None) -> None:
        """Print a human-readable diagnostic report."""
        out = file or sys.stdout

        print("=" * 60, file=out)
        print("DIAGNOSTIC REPORT", file=out)
        print("=" * 60, file=out)
        print(f"Layouts: {self.layout_count}  |  Block types: {self.block_type_count}  |  "
              f"Slides: {self.slide_count}", file=out)
        print(f"Issues: {len(self.errors)} errors, {len(self.warnings)} warnings, "
              f"{len(self.issues) - len(self.errors) - len(self.warnings)} info", file=out)
        print("-" * 60, file=out)

        for issue in self.issues:
            prefix = {
                Severity.error: "ERROR  ",
                Severity.warning: "WARN   ",
                Severity.info: "INFO   ",
            }[issue.severity]

            subject_str = f" [{issue.subject}]" if issue.subject is not None else ""
            print(f"  {prefix} {issue.code}{subject_str}: {issue.message}", file=out)
            if issue.detail:
                print(f"         {issue.detail}", file=out)

        print("-" * 60, file=out)
        if self.has_blocking_issues:
            print("RESULT: BLOCKING errors found.", file=out)
        elif self.warnings:
            print("RESULT: Warnings found. Some blocks may not be displayed.", file=out)
        else:
            print("RESULT: No problems found.", file=out)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "layout_count": self.layout_count,
            "block_type_count": self.block_type_count,
            "slide_count": self.slide_count,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "has_blocking_issues": self.has_blocking_issues,
            "issues": [
                {
                    "code": i.code,
                    "severity": i.severity.value,
                    "message": i.message,
                    "subject": i.subject,
                    "category": i.category,
                    "detail": i.detail,
                }
                for i in self.issues
            ],
        }


# ============================================================
# LAYOUT CHECKS
# ============================================================

def _check_slot_bounds(layout: LayoutDefinition, report: DiagnosticReport) -> None:
    """LAYOUT-001: Every slot must lie inside the 12x6 grid."""
    for slot in layout.slots:
        if not slot.in_bounds(GRID_COLUMNS, GRID_ROWS):
            report.issues.append(DiagnosticIssue(
                code="LAYOUT-001",
                severity=Severity.error,
                message=f"Slot '{slot.id}' lies outside the {GRID_COLUMNS}x{GRID_ROWS} grid",
                subject=layout.id.value,
                category="geometry",
                detail=f"columns {slot.column}-{slot.last_column}, rows {slot.row}-{slot.last_row}",
            ))


def _check_slot_overlap(layout: LayoutDefinition, report: DiagnosticReport) -> None:
    """LAYOUT-002: Slots within one layout must not overlap."""
    for a, b in combinations(layout.slots, 2):
        if a.overlaps(b):
            report.issues.append(DiagnosticIssue(
                code="LAYOUT-002",
                severity=Severity.error,
                message=f"Slots '{a.id}' and '{b.id}' overlap",
                subject=layout.id.value,
                category="geometry",
            ))


def _check_block_range(layout: LayoutDefinition, report: DiagnosticReport) -> None:
    """LAYOUT-003: The block range must be valid and every count must get a slot."""
    if layout.min_blocks < 0 or layout.min_blocks > layout.max_blocks:
        report.issues.append(DiagnosticIssue(
            code="LAYOUT-003",
            severity=Severity.error,
            message=f"Invalid block range {layout.min_blocks}-{layout.max_blocks}",
            subject=layout.id.value,
            category="range",
        ))
    elif len(layout.slots) < layout.max_blocks:
        report.issues.append(DiagnosticIssue(
            code="LAYOUT-003",
            severity=Severity.error,
            message=f"Layout has {len(layout.slots)} slots but accepts up to {layout.max_blocks} blocks",
            subject=layout.id.value,
            category="range",
        ))


def _check_slot_ids(layout: LayoutDefinition, report: DiagnosticReport) -> None:
    """LAYOUT-004: Slot ids must be unique within a layout."""
    seen = set()
    for slot in layout.slots:
        if slot.id in seen:
            report.issues.append(DiagnosticIssue(
                code="LAYOUT-004",
                severity=Severity.error,
                message=f"Duplicate slot id '{slot.id}'",
                subject=layout.id.value,
                category="structure",
            ))
        seen.add(slot.id)


def _check_deprecated(layout: LayoutDefinition, report: DiagnosticReport) -> None:
    """LAYOUT-005: Note layouts kept only for old lessons."""
    if layout.deprecated:
        report.issues.append(DiagnosticIssue(
            code="LAYOUT-005",
            severity=Severity.info,
            message="Layout is deprecated and not offered for new slides",
            subject=layout.id.value,
            category="structure",
        ))


def _check_coverage(layout: LayoutDefinition, report: DiagnosticReport) -> None:
    """LAYOUT-006: Note layouts that leave grid cells uncovered."""
    covered = set()
    for slot in layout.slots:
        covered |= slot.cells()
    total = GRID_COLUMNS * GRID_ROWS
    inside = {(c, r) for c, r in covered if 1 <= c <= GRID_COLUMNS and 1 <= r <= GRID_ROWS}
    if len(inside) < total:
        report.issues.append(DiagnosticIssue(
            code="LAYOUT-006",
            severity=Severity.info,
            message=f"Layout covers {len(inside)} of {total} grid cells",
            subject=layout.id.value,
            category="geometry",
        ))


# ============================================================
# REGISTRY CHECKS
# ============================================================

def _check_block_type(registry: BlockTypeRegistry, block_type: str, report: DiagnosticReport) -> None:
    """REG-001/002/003: Templateable fields, factory output and default validity."""
    definition = registry.get(block_type)

    if not definition.templateable_fields:
        report.issues.append(DiagnosticIssue(
            code="REG-001",
            severity=Severity.info,
            message="Block type has no templateable fields; it cannot be saved as a template",
            subject=block_type,
            category="templates",
        ))

    try:
        block = definition.create_default(registry.defaults)
    except ValidationError as exc:
        report.issues.append(DiagnosticIssue(
            code="REG-002",
            severity=Severity.error,
            message="Default factory does not produce valid content for this type",
            subject=block_type,
            category="factory",
            detail=str(exc).splitlines()[0],
        ))
        return

    reason = registry.validate(block)
    if reason:
        report.issues.append(DiagnosticIssue(
            code="REG-003",
            severity=Severity.info,
            message="A new default block does not pass validation until edited",
            subject=block_type,
            category="factory",
            detail=reason,
        ))


# ============================================================
# SLIDE CHECKS
# ============================================================

def _check_slide_fit(slide: Slide, report: DiagnosticReport) -> None:
    """SLIDE-001: Block count outside the layout's range."""
    fit = check_layout_fit(slide)
    if fit.fits:
        return
    detail_parts = []
    if fit.unplaced_block_ids:
        detail_parts.append(f"not displayed: {', '.join(fit.unplaced_block_ids)}")
    if fit.empty_slot_ids:
        detail_parts.append(f"empty slots: {', '.join(fit.empty_slot_ids)}")
    report.issues.append(DiagnosticIssue(
        code="SLIDE-001",
        severity=Severity.warning,
        message=fit.describe(),
        subject=slide.id,
        category="layout",
        detail="; ".join(detail_parts),
    ))


def _check_duplicate_blocks(slide: Slide, report: DiagnosticReport) -> None:
    """SLIDE-002: The same block placed twice on one slide."""
    seen = set()
    for block_id in slide.block_ids:
        if block_id in seen:
            report.issues.append(DiagnosticIssue(
                code="SLIDE-002",
                severity=Severity.warning,
                message=f"Block '{block_id}' appears more than once",
                subject=slide.id,
                category="blocks",
            ))
        seen.add(block_id)


def _check_slide_blocks(
    slide: Slide,
    blocks: Iterable[BlockBase],
    registry: Optional[BlockTypeRegistry],
    report: DiagnosticReport,
) -> None:
    """SLIDE-003/004: Missing block instances and blocks that fail validation."""
    by_id = {block.id: block for block in blocks}
    for block_id in dict.fromkeys(slide.block_ids):
        block = by_id.get(block_id)
        if block is None:
            report.issues.append(DiagnosticIssue(
                code="SLIDE-003",
                severity=Severity.warning,
                message=f"Block '{block_id}' has no instance",
                subject=slide.id,
                category="blocks",
            ))
            continue
        if registry is None:
            continue
        reason = registry.validate(block)
        if reason:
            report.issues.append(DiagnosticIssue(
                code="SLIDE-004",
                severity=Severity.info,
                message=f"Block '{block_id}' ({block.type}) is incomplete",
                subject=slide.id,
                category="blocks",
                detail=reason,
            ))


# ============================================================
# PUBLIC API
# ============================================================

def diagnose_catalogue(
    catalogue: Optional[Dict[SlideLayout, LayoutDefinition]] = None,
) -> DiagnosticReport:
    """Check every layout in a catalogue (the built-in one by default)."""
    catalogue = LAYOUT_CATALOGUE if catalogue is None else catalogue
    report = DiagnosticReport(layout_count=len(catalogue))

    for layout in catalogue.values():
        _check_slot_bounds(layout, report)
        _check_slot_overlap(layout, report)
        _check_block_range(layout, report)
        _check_slot_ids(layout, report)
        _check_deprecated(layout, report)
        _check_coverage(layout, report)

    return report


def diagnose_registry(registry: BlockTypeRegistry) -> DiagnosticReport:
    """Check every registered block type."""
    report = DiagnosticReport(block_type_count=len(registry))
    for definition in registry.get_all():
        _check_block_type(registry, definition.type.value, report)
    return report


def diagnose_slide(
    slide: Slide,
    blocks: Optional[Iterable[BlockBase]] = None,
    registry: Optional[BlockTypeRegistry] = None,
) -> DiagnosticReport:
    """Check one slide. Block instance checks run only when blocks are given."""
    report = DiagnosticReport(slide_count=1)
    _check_slide_fit(slide, report)
    _check_duplicate_blocks(slide, report)
    if blocks is not None:
        _check_slide_blocks(slide, blocks, registry, report)
    return report
