"""
Excel export for solved cash ladders.

Creates a workbook with three sheets:
1. Summary - status, objective and requirement vector
2. Variables - optimal values and reduced costs
3. Constraints - shadow prices and allowable RHS ranges
"""

import math
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from ..optimization.result_schema import CashLadderSolution, SensitivityReport

logger = logging.getLogger(__name__)

# Color constants
HEADER_COLOR = "1E88E5"
ALT_ROW_COLOR = "F5F5F5"
BINDING_COLOR = "FFF9C4"  # Yellow: variable at a bound

#: Text written for infinite ranges and missing bounds
UNBOUNDED_LABEL = "unbounded"

NUMBER_FORMAT = '#,##0.0000'


def create_header_style() -> Dict[str, Any]:
    """Create header row style (blue background, white text, bold)."""
    return {
        'font': Font(name='Calibri', size=11, bold=True, color='FFFFFF'),
        'fill': PatternFill(start_color=HEADER_COLOR, end_color=HEADER_COLOR, fill_type='solid'),
        'alignment': Alignment(horizontal='center', vertical='center', wrap_text=True),
        'border': Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )
    }


def write_headers(worksheet, headers: List[str], row: int = 1):
    """Write a styled header row."""
    style = create_header_style()
    for col_idx, header in enumerate(headers, 1):
        cell = worksheet.cell(row=row, column=col_idx)
        cell.value = header
        cell.font = style['font']
        cell.fill = style['fill']
        cell.alignment = style['alignment']
        cell.border = style['border']


def apply_alternating_rows(worksheet, start_row: int, end_row: int, start_col: int, end_col: int):
    """Apply alternating row colors (white / light gray)."""
    fill = PatternFill(start_color=ALT_ROW_COLOR, end_color=ALT_ROW_COLOR, fill_type='solid')
    for row_idx in range(start_row, end_row + 1):
        if (row_idx - start_row) % 2 == 1:
            for col_idx in range(start_col, end_col + 1):
                worksheet.cell(row=row_idx, column=col_idx).fill = fill


def auto_fit_columns(worksheet, max_width: int = 40):
    """Auto-fit column widths based on content."""
    for column in worksheet.columns:
        column_letter = get_column_letter(column[0].column)
        max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        worksheet.column_dimensions[column_letter].width = min(max_length + 2, max_width)


def excel_value(amount: Optional[float]):
    """Excel has no infinity; infinite or missing bounds become a label."""
    if amount is None or math.isinf(amount):
        return UNBOUNDED_LABEL
    return amount


def export_solution_to_excel(
    solution: CashLadderSolution,
    report: Optional[SensitivityReport],
    output_path: Union[str, Path],
    status: str = "optimal",
) -> Path:
    """
    Export a solved cash ladder to a formatted Excel file.

    Args:
        solution: Optimal solution
        report: Sensitivity report (None leaves reduced costs and the
            Constraints sheet without sensitivity columns)
        output_path: Path to save the Excel file
        status: Solve status shown on the Summary sheet

    Returns:
        Path to created file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    wb.remove(wb.active)

    _write_summary(wb.create_sheet("Summary"), solution, status)
    _write_variables(wb.create_sheet("Variables"), solution, report)
    _write_constraints(wb.create_sheet("Constraints"), solution, report)

    wb.save(output_path)
    logger.info(f"Exported cash ladder solution to {output_path}")
    return output_path


def _write_summary(ws, solution: CashLadderSolution, status: str):
    write_headers(ws, ['Item', 'Value'])
    rows = [
        ('Status', status),
        ('Objective (terminal cash)', solution.objective_value),
        ('Terminal variable', solution.families[solution.terminal_symbol][-1].name),
        ('Months', len(solution.requirements)),
        ('Exported', datetime.now().strftime('%Y-%m-%d %H:%M')),
    ]
    for row_idx, (label, value) in enumerate(rows, 2):
        ws.cell(row=row_idx, column=1, value=label).font = Font(name='Calibri', size=10, bold=True)
        cell = ws.cell(row=row_idx, column=2, value=value)
        if isinstance(value, float):
            cell.number_format = NUMBER_FORMAT

    start = len(rows) + 3
    write_headers(ws, ['Month', 'Requirement'], row=start)
    for month, amount in enumerate(solution.requirements, 1):
        ws.cell(row=start + month, column=1, value=month)
        ws.cell(row=start + month, column=2, value=amount).number_format = NUMBER_FORMAT

    auto_fit_columns(ws)


def _write_variables(ws, solution: CashLadderSolution, report: Optional[SensitivityReport]):
    headers = ['Variable', 'Family', 'Index', 'Value']
    if report is not None:
        headers += ['Reduced Cost', 'Lower Bound', 'Upper Bound']
    write_headers(ws, headers)

    binding_fill = PatternFill(start_color=BINDING_COLOR, end_color=BINDING_COLOR, fill_type='solid')
    row_idx = 1
    for values in solution.families.values():
        for item in values:
            row_idx += 1
            row = [item.name, item.symbol, item.index, item.value]
            entry = report.variable(item.name) if report is not None else None
            if entry is not None:
                row += [entry.reduced_cost, entry.lower_bound, excel_value(entry.upper_bound)]
            for col_idx, value in enumerate(row, 1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                if col_idx >= 4 and isinstance(value, float):
                    cell.number_format = NUMBER_FORMAT
            if entry is not None and entry.at_upper_bound:
                for col_idx in range(1, len(headers) + 1):
                    ws.cell(row=row_idx, column=col_idx).fill = binding_fill

    ws.freeze_panes = 'A2'
    auto_fit_columns(ws)


def _write_constraints(ws, solution: CashLadderSolution, report: Optional[SensitivityReport]):
    headers = ['Constraint', 'Month', 'RHS']
    if report is not None:
        headers += ['Shadow Price', 'Allowable Increase', 'Allowable Decrease', 'RHS Low', 'RHS High']
    write_headers(ws, headers)

    for month, rhs in enumerate(solution.requirements, 1):
        row = [f"balance[{month}]", month, rhs]
        if report is not None:
            entry = report.constraint(month)
            low, high = entry.rhs_range
            row += [
                entry.shadow_price,
                excel_value(entry.allowable_increase),
                excel_value(entry.allowable_decrease),
                excel_value(low),
                excel_value(high),
            ]
        for col_idx, value in enumerate(row, 1):
            cell = ws.cell(row=month + 1, column=col_idx, value=value)
            if col_idx >= 3 and isinstance(value, float):
                cell.number_format = NUMBER_FORMAT

    if solution.requirements:
        apply_alternating_rows(ws, 2, len(solution.requirements) + 1, 1, len(headers))
    ws.freeze_panes = 'A2'
    auto_fit_columns(ws)
