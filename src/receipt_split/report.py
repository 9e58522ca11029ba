"""PDF report rendering with reportlab."""

import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from reportlab.platypus.doctemplate import LayoutError

from .categorizer import Classifier, totals_by_category
from .exceptions import ReportError
from .models import Balance, Expense
from .roster import Roster
from .settlement import compute_total, round_currency

logger = logging.getLogger(__name__)

PRIMARY = colors.HexColor("#4CAF50")
MUTED = colors.HexColor("#666666")
GRID = colors.HexColor("#dddddd")

_HEADER_STYLE = [
    ("BACKGROUND", (0, 0), (-1, 0), PRIMARY),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("ALIGN", (0, 0), (-1, -1), "LEFT"),
    ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ("BOTTOMPADDING", (0, 0), (-1, 0), 10),
    ("GRID", (0, 0), (-1, -1), 0.5, GRID),
    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f9f9f9")]),
]


def format_money(amount: Decimal, symbol: str = "$") -> str:
    """Format an amount with thousands separators and exactly 2 decimals."""
    return f"{symbol}{round_currency(amount):,.2f}"


def _styles() -> dict[str, ParagraphStyle]:
    styles = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "ReportTitle",
            parent=styles["Heading1"],
            fontSize=22,
            textColor=PRIMARY,
            spaceAfter=8,
        ),
        "heading": ParagraphStyle(
            "ReportHeading",
            parent=styles["Heading2"],
            fontSize=14,
            textColor=MUTED,
            spaceBefore=14,
            spaceAfter=8,
        ),
        "total": ParagraphStyle(
            "ReportTotal",
            parent=styles["Normal"],
            fontSize=26,
            leading=32,
            textColor=PRIMARY,
            alignment=TA_CENTER,
        ),
        "footer": ParagraphStyle(
            "ReportFooter",
            parent=styles["Normal"],
            fontSize=8,
            textColor=MUTED,
            alignment=TA_CENTER,
        ),
        "cell": ParagraphStyle(
            "ReportCell",
            parent=styles["Normal"],
            fontSize=9,
            leading=11,
        ),
        "normal": styles["Normal"],
    }


def _table(
    rows: list[list], col_widths: list[float], right_cols: int = 1
) -> Table:
    """Build a table whose last ``right_cols`` columns are right-aligned."""
    table = Table(rows, colWidths=col_widths, repeatRows=1)
    style = list(_HEADER_STYLE)
    style.append(("ALIGN", (-right_cols, 0), (-1, -1), "RIGHT"))
    table.setStyle(TableStyle(style))
    return table


def _expense_rows(
    expenses: Sequence[Expense],
    roster: Roster | None,
    classifier: Classifier | None,
    money: Callable[[Decimal], str],
    cell_style: ParagraphStyle,
) -> list[list]:
    """Header plus one row per expense; descriptions wrap instead of truncating."""
    header = ["Description", "Paid by", "Date"]
    if classifier is not None:
        header.append("Category")
    header.append("Amount")
    rows: list[list] = [header]
    for expense in expenses:
        payer = roster.get_user_name(expense.paid_by) if roster else expense.paid_by
        row = [
            Paragraph(escape(expense.description), cell_style),
            payer,
            expense.date.strftime("%Y-%m-%d"),
        ]
        if classifier is not None:
            row.append(classifier(expense.description).value)
        row.append(money(expense.amount))
        rows.append(row)
    return rows


def generate_pdf_report(
    expenses: Sequence[Expense],
    balances: Sequence[Balance],
    totals_by_person: Mapping[str, Decimal],
    output_path: Path,
    *,
    roster: Roster | None = None,
    average: Decimal | None = None,
    currency_symbol: str = "$",
    title: str = "Shared Expenses Report",
    classifier: Classifier | None = None,
    generated_at: datetime | None = None,
) -> Path:
    """
    Render the shared expenses report as a PDF.

    Args:
        expenses: Expenses to list
        balances: Settlement transfers
        totals_by_person: Amount paid per display name
        output_path: Where to write the PDF
        roster: Used to show payer names; ids are shown without it
        average: Optional per-person average to display
        currency_symbol: Symbol prefixed to every amount
        title: Report title
        classifier: When given, adds a category column and a category summary
        generated_at: Report timestamp, defaults to now

    Returns:
        The path of the written PDF

    Raises:
        ReportError: If the document cannot be written
    """
    generated_at = generated_at or datetime.now()
    styles = _styles()

    def money(amount: Decimal) -> str:
        return format_money(amount, currency_symbol)

    story = [
        Paragraph(escape(title), styles["title"]),
        Paragraph(
            f"<b>Report date:</b> {generated_at.strftime('%B %d, %Y')}",
            styles["normal"],
        ),
        Paragraph(f"<b>Recorded expenses:</b> {len(expenses)}", styles["normal"]),
        Spacer(1, 0.25 * inch),
        Paragraph("TOTAL SPENT", styles["footer"]),
        Paragraph(f"<b>{money(compute_total(expenses))}</b>", styles["total"]),
    ]
    if average is not None:
        story.append(
            Paragraph(f"Average per person: {money(average)}", styles["footer"])
        )

    # Totals paid by person
    story.append(Paragraph("Total Paid by Person", styles["heading"]))
    rows = [["Name", "Total Paid"]]
    rows.extend([name, money(total)] for name, total in totals_by_person.items())
    story.append(_table(rows, [3.5 * inch, 2 * inch]))

    # Per-category spend
    if classifier is not None and expenses:
        story.append(Paragraph("Spending by Category", styles["heading"]))
        rows = [["Category", "Amount"]]
        rows.extend(
            [category.value, money(total)]
            for category, total in totals_by_category(expenses, classifier).items()
        )
        story.append(_table(rows, [3.5 * inch, 2 * inch]))

    # Expense detail
    story.append(Paragraph("Expense Details", styles["heading"]))
    rows = _expense_rows(expenses, roster, classifier, money, styles["cell"])
    widths = [2.4 * inch, 1.2 * inch, 1 * inch]
    if classifier is not None:
        widths.append(1.2 * inch)
    widths.append(1 * inch)
    story.append(_table(rows, widths))

    # Who owes whom
    story.append(Paragraph("Balances: Who Owes Whom", styles["heading"]))
    if not balances:
        story.append(
            Paragraph(
                "<b>All settled!</b> Everyone has paid their fair share.",
                styles["normal"],
            )
        )
    for balance in balances:
        story.append(
            Paragraph(
                f"<b>{escape(balance.from_)}</b> owes <b>{escape(balance.to)}</b>: "
                f"{money(balance.amount)}",
                styles["normal"],
            )
        )

    story.append(Spacer(1, 0.4 * inch))
    story.append(Paragraph("Report generated automatically", styles["footer"]))
    story.append(
        Paragraph(generated_at.strftime("%Y-%m-%d %H:%M"), styles["footer"])
    )

    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        doc = SimpleDocTemplate(
            str(output_path),
            pagesize=letter,
            topMargin=0.5 * inch,
            bottomMargin=0.5 * inch,
            title=title,
        )
        doc.build(story)
    except (OSError, LayoutError) as e:
        logger.error(f"Error generating PDF: {e}")
        raise ReportError(f"Could not generate the PDF report: {e}") from e

    logger.info(f"Wrote report with {len(expenses)} expenses to {output_path}")
    return output_path
