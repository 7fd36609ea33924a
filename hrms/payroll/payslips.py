"""
Payslip PDF rendering and storage.

PDFs are drawn with reportlab's platypus layer on a single A4 page. The
built-in Helvetica face has no Naira glyph, so amounts on the PDF carry an
``NGN`` prefix; emails use ``₦``.
"""

from __future__ import annotations

import io
import logging
import re
from decimal import Decimal
from typing import TYPE_CHECKING
from xml.sax.saxutils import escape

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.db import transaction
from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph
from reportlab.platypus import SimpleDocTemplate
from reportlab.platypus import Spacer
from reportlab.platypus import Table
from reportlab.platypus import TableStyle

from hrms.payroll.models import Payroll
from hrms.payroll.models import Payslip

if TYPE_CHECKING:
    from hrms.companies.models import Company
    from hrms.payroll.importers.rows import PayrollRow
    from hrms.staff.models import StaffRecord

logger = logging.getLogger(__name__)

PAYSLIP_DIR = "payslips"
BRAND = colors.HexColor("#1e3a5f")
EARNINGS_COLOR = colors.HexColor("#0f5132")
DEDUCTIONS_COLOR = colors.HexColor("#8b0000")
PANEL = colors.HexColor("#f3f6fb")
NET_PANEL = colors.HexColor("#e8f0ff")
NET_TEXT = colors.HexColor("#0b1f44")
PDF_CURRENCY = "NGN "
CONTENT_WIDTH = A4[0] - 40 * mm


class PayslipGenerationError(Exception):
    """Rendering or storing a payslip failed for one staff member."""


def format_naira(amount, symbol: str = "₦") -> str:
    """Format an amount as Naira, e.g. ``₦1,234,567.50``."""
    value = Decimal(str(amount if amount is not None else 0))
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def _pdf_money(amount) -> str:
    return format_naira(amount, symbol=PDF_CURRENCY)


def _days(value: Decimal) -> str:
    if value == value.to_integral_value():
        return str(int(value))
    return f"{value.normalize():f}"


def _styles():
    base = getSampleStyleSheet()
    return {
        "company": ParagraphStyle(
            "PayslipCompany",
            parent=base["Heading1"],
            fontSize=18,
            textColor=colors.white,
            spaceAfter=2,
        ),
        "banner": ParagraphStyle(
            "PayslipBanner",
            parent=base["Normal"],
            fontSize=10,
            textColor=colors.white,
        ),
        "banner_right": ParagraphStyle(
            "PayslipBannerRight",
            parent=base["Normal"],
            fontSize=9,
            textColor=colors.white,
            alignment=TA_RIGHT,
        ),
        "normal": ParagraphStyle("PayslipNormal", parent=base["Normal"], fontSize=10),
        "section": ParagraphStyle(
            "PayslipSection",
            parent=base["Heading3"],
            fontSize=12,
            spaceBefore=10,
            spaceAfter=4,
        ),
        "footer": ParagraphStyle(
            "PayslipFooter",
            parent=base["Normal"],
            fontSize=8,
            textColor=colors.HexColor("#666666"),
            alignment=TA_CENTER,
        ),
    }


def _header(company_name: str, row: PayrollRow, styles) -> Table:
    period = row.period
    generated = timezone.localdate().strftime("%d %b %Y")
    data = [
        [
            Paragraph(escape(company_name or "COMPANY NAME LTD"), styles["company"]),
            Paragraph(
                f"Pay Period: {period.month:02d}/{period.year}<br/>"
                f"Generated: {generated}",
                styles["banner_right"],
            ),
        ],
        [Paragraph("Salary Payslip", styles["banner"]), ""],
    ]
    table = Table(data, colWidths=[CONTENT_WIDTH * 0.6, CONTENT_WIDTH * 0.4])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), BRAND),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("LEFTPADDING", (0, 0), (-1, -1), 10),
                ("RIGHTPADDING", (0, 0), (-1, -1), 10),
                ("TOPPADDING", (0, 0), (-1, 0), 10),
                ("BOTTOMPADDING", (0, -1), (-1, -1), 10),
            ]
        )
    )
    return table


def _staff_block(staff: StaffRecord, styles) -> Table:
    def line(label, value):
        return Paragraph(f"<b>{label}:</b> {escape(value or 'N/A')}", styles["normal"])

    data = [
        [line("Staff Name", staff.full_name), line("Department", staff.department)],
        [line("Staff ID", staff.staff_id), line("Designation", staff.position)],
        [line("Email", staff.email), ""],
    ]
    table = Table(data, colWidths=[CONTENT_WIDTH / 2, CONTENT_WIDTH / 2])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), PANEL),
                ("LEFTPADDING", (0, 0), (-1, -1), 10),
                ("TOPPADDING", (0, 0), (-1, -1), 5),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
            ]
        )
    )
    return table


def _amounts_table(items, total_label: str, total, color) -> Table:
    data = [[label, _pdf_money(value)] for label, value in items]
    data.append([total_label, _pdf_money(total)])
    table = Table(data, colWidths=[CONTENT_WIDTH * 0.65, CONTENT_WIDTH * 0.35])
    table.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
                ("FONTSIZE", (0, 0), (-1, -1), 10),
                ("ALIGN", (1, 0), (1, -1), "RIGHT"),
                ("LINEABOVE", (0, 0), (-1, 0), 1, color),
                ("LINEABOVE", (0, -1), (-1, -1), 0.5, color),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, -1), (-1, -1), 11),
                ("TEXTCOLOR", (0, -1), (-1, -1), color),
                ("TOPPADDING", (0, 0), (-1, -1), 4),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
            ]
        )
    )
    return table


def _net_pay(row: PayrollRow) -> Table:
    table = Table(
        [["NET SALARY", _pdf_money(row.net_salary)]],
        colWidths=[CONTENT_WIDTH * 0.55, CONTENT_WIDTH * 0.45],
    )
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), NET_PANEL),
                ("TEXTCOLOR", (0, 0), (-1, -1), NET_TEXT),
                ("FONTNAME", (0, 0), (-1, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 14),
                ("ALIGN", (1, 0), (1, 0), "RIGHT"),
                ("TOPPADDING", (0, 0), (-1, -1), 12),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 12),
                ("LEFTPADDING", (0, 0), (-1, -1), 12),
                ("RIGHTPADDING", (0, 0), (-1, -1), 12),
            ]
        )
    )
    return table


def render_payslip_pdf(
    *, company_name: str, staff: StaffRecord, row: PayrollRow
) -> bytes:
    """Render the payslip for one validated payroll row and return PDF bytes."""
    styles = _styles()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=20 * mm,
        rightMargin=20 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title=f"Payslip {row.period.month_name} {row.period.year}",
        author=company_name,
    )

    earnings = [
        ("Basic Salary", row.basic),
        ("Housing Allowance", row.housing),
        ("Transport Allowance", row.transport),
        ("Dressing / Transportation", row.dressing),
        ("Other Allowances", row.other_allowances),
    ]
    deductions = [("PAYE", row.paye), ("Pension", row.pension)]

    earnings_title = ParagraphStyle(
        "PayslipEarnings", parent=styles["section"], textColor=BRAND
    )
    deductions_title = ParagraphStyle(
        "PayslipDeductions", parent=styles["section"], textColor=DEDUCTIONS_COLOR
    )

    elements = [
        _header(company_name, row, styles),
        Spacer(1, 10),
        _staff_block(staff, styles),
        Spacer(1, 6),
        Paragraph("EARNINGS", earnings_title),
        _amounts_table(earnings, "Total Gross Pay", row.gross_pay, EARNINGS_COLOR),
        Paragraph("DEDUCTIONS", deductions_title),
        _amounts_table(
            deductions, "Total Deductions", row.paye + row.pension, DEDUCTIONS_COLOR
        ),
        Spacer(1, 14),
        _net_pay(row),
        Spacer(1, 12),
        Paragraph(
            f"Working Days In Month: {_days(row.working_days)}"
            f"&nbsp;&nbsp;&nbsp;&nbsp;Days Worked: {_days(row.days_worked)}",
            styles["normal"],
        ),
        Spacer(1, 30),
        Paragraph(
            "This is a system-generated payslip. No signature required.",
            styles["footer"],
        ),
    ]
    doc.build(elements)
    return buffer.getvalue()


def payslip_file_name(staff: StaffRecord, row: PayrollRow) -> str:
    """Storage path for a new payslip; never overwrites an existing file."""
    safe_id = re.sub(r"[^A-Za-z0-9_-]+", "-", staff.staff_id).strip("-")
    safe_id = safe_id or str(staff.pk)
    base = f"payslip-{safe_id}-{row.period.month:02d}-{row.period.year}"
    name = f"{PAYSLIP_DIR}/{base}.pdf"
    if default_storage.exists(name):
        stamp = int(timezone.now().timestamp() * 1000)
        name = f"{PAYSLIP_DIR}/{base}-{stamp}.pdf"
    return name


def find_payslip(
    company: Company, staff: StaffRecord, period_year: int, period_key: str
) -> Payslip | None:
    return Payslip.objects.filter(
        company=company, staff=staff, period_year=period_year, period_key=period_key
    ).first()


def generate_payslip(
    company: Company, staff: StaffRecord, payroll: Payroll, row: PayrollRow
) -> Payslip | None:
    """Render and store the payslip for a payroll row.

    Returns ``None`` when a payslip for the same staff and period already
    exists; payslips are generated once and never regenerated.
    """
    if find_payslip(company, staff, payroll.period_year, payroll.period_key):
        return None

    try:
        pdf = render_payslip_pdf(company_name=company.name, staff=staff, row=row)
    except Exception as exc:  # noqa: BLE001
        msg = f"Failed to generate payslip PDF - {exc}"
        raise PayslipGenerationError(msg) from exc

    path = payslip_file_name(staff, row)
    try:
        stored = default_storage.save(path, ContentFile(pdf))
        with transaction.atomic():
            payslip = Payslip.objects.create(
                company=company,
                staff=staff,
                payroll=payroll,
                period_year=payroll.period_year,
                period_month=payroll.period_month,
                month_label=payroll.month_label,
                period_key=payroll.period_key,
                file=stored,
                file_name=stored.rsplit("/", 1)[-1],
                gross_pay=payroll.gross_pay,
                net_pay=payroll.net_salary,
            )
    except Exception as exc:  # noqa: BLE001
        msg = f"Payslip record error - {exc}"
        raise PayslipGenerationError(msg) from exc

    logger.debug("Stored payslip %s for staff %s", stored, staff.staff_id)
    return payslip
