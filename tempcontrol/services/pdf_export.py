# =====================================================
# tempcontrol/services/pdf_export.py - Form PDF Export
# =====================================================
"""
Export PDF di un singolo form.

build_form_document seleziona e ordina i dati (letture per record_order,
alert per severità decrescente); render_form_pdf li disegna con reportlab.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time
from io import BytesIO
from typing import List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from tempcontrol.models.base import utcnow
from tempcontrol.models.enums import AlertSeverity
from tempcontrol.models.temperature_form import TemperatureControlForm

PAGE_WIDTH, PAGE_HEIGHT = A4
LEFT = 20 * mm
RIGHT = PAGE_WIDTH - 20 * mm
TOP = PAGE_HEIGHT - 20 * mm
BOTTOM = 25 * mm
ROW_HEIGHT = 6 * mm

# Colonne tabella letture: (titolo, x)
RECORD_COLUMNS = (
    ("Car", LEFT),
    ("Product", LEFT + 14 * mm),
    ("Temp °C", LEFT + 62 * mm),
    ("Defrost", LEFT + 80 * mm),
    ("Cons. start", LEFT + 98 * mm),
    ("Cons. end", LEFT + 118 * mm),
    ("Observations", LEFT + 138 * mm),
)


def _fmt_date(value: Optional[date]) -> str:
    return value.strftime("%d/%m/%Y") if value else "-"


def _fmt_datetime(value: Optional[datetime]) -> str:
    return value.strftime("%d/%m/%Y %H:%M") if value else "-"


def _fmt_time(value: Optional[time]) -> str:
    return value.strftime("%H:%M") if value else "-"


@dataclass
class RecordRow:
    car_number: int
    product: str
    temperature: str
    defrost_start: str
    consumption_start: str
    consumption_end: str
    observations: str
    out_of_range: bool


@dataclass
class FormDocument:
    """Dati del PDF, già filtrati e ordinati"""
    form_number: str
    destination: str
    defrost_date: str
    production_date: str
    status: str
    created_by: str
    created_at: str
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[str] = None
    review_notes: Optional[str] = None
    records: List[RecordRow] = field(default_factory=list)
    alert_messages: List[str] = field(default_factory=list)
    observations: Optional[str] = None
    generated_at: str = ""

    @property
    def filename(self) -> str:
        return f"TemperatureForm_{self.form_number}.pdf"


def build_form_document(form: TemperatureControlForm, generated_at: Optional[datetime] = None) -> FormDocument:
    """Seleziona i dati del form per l'export"""
    records = sorted(form.active_records, key=lambda r: r.record_order)
    alerts = sorted(
        form.active_alerts,
        key=lambda a: AlertSeverity(a.severity).rank,
        reverse=True,
    )

    document = FormDocument(
        form_number=form.form_number,
        destination=form.destination,
        defrost_date=_fmt_date(form.defrost_date),
        production_date=_fmt_date(form.production_date),
        status=form.status,
        created_by=form.created_by_user.name if form.created_by_user else "",
        created_at=_fmt_datetime(form.created_at),
        records=[
            RecordRow(
                car_number=record.car_number,
                product=f"{record.product_code} {record.product_name}".strip(),
                temperature=f"{record.product_temperature:.1f}",
                defrost_start=_fmt_time(record.defrost_start_time),
                consumption_start=_fmt_time(record.consumption_start_time),
                consumption_end=_fmt_time(record.consumption_end_time),
                observations=record.observations or "",
                out_of_range=record.has_alert,
            )
            for record in records
        ],
        alert_messages=[alert.message for alert in alerts],
        observations=form.observations if form.observations and form.observations.strip() else None,
        generated_at=_fmt_datetime(generated_at or utcnow()),
    )

    if form.reviewed_by_user is not None:
        document.reviewed_by = form.reviewed_by_user.name
        document.reviewed_at = _fmt_datetime(form.reviewed_at)
        document.review_notes = form.review_notes if form.review_notes and form.review_notes.strip() else None

    return document


class _PdfWriter:
    """Canvas con cursore verticale e paginazione manuale"""

    def __init__(self, document: FormDocument):
        self.document = document
        self.buffer = BytesIO()
        self.canvas = canvas.Canvas(self.buffer, pagesize=A4)
        self.canvas.setTitle(f"Temperature control form {document.form_number}")
        self.page = 1
        self.y = TOP

    def footer(self) -> None:
        self.canvas.setFont("Helvetica", 8)
        self.canvas.setFillColor(colors.black)
        self.canvas.drawCentredString(
            PAGE_WIDTH / 2,
            12 * mm,
            f"Generated on {self.document.generated_at} - Page {self.page}",
        )

    def new_page(self) -> None:
        self.footer()
        self.canvas.showPage()
        self.page += 1
        self.y = TOP

    def ensure_space(self, height: float) -> None:
        if self.y - height < BOTTOM:
            self.new_page()

    def line(self, text: str, font: str = "Helvetica", size: int = 10, x: float = LEFT, step: float = 5 * mm) -> None:
        self.ensure_space(step)
        self.canvas.setFont(font, size)
        self.canvas.drawString(x, self.y, text)
        self.y -= step

    def rule(self) -> None:
        self.ensure_space(4 * mm)
        self.canvas.line(LEFT, self.y, RIGHT, self.y)
        self.y -= 6 * mm

    def section(self, title: str) -> None:
        self.rule()
        self.line(title, font="Helvetica-Bold", size=12, step=7 * mm)

    def record_header(self) -> None:
        self.canvas.setFillColor(colors.lightgrey)
        self.canvas.rect(LEFT - 1 * mm, self.y - 1.5 * mm, RIGHT - LEFT + 2 * mm, ROW_HEIGHT, stroke=0, fill=1)
        self.canvas.setFillColor(colors.black)
        self.canvas.setFont("Helvetica-Bold", 9)
        for title, x in RECORD_COLUMNS:
            self.canvas.drawString(x, self.y, title)
        self.y -= ROW_HEIGHT

    def record_row(self, row: RecordRow) -> None:
        if self.y - ROW_HEIGHT < BOTTOM:
            self.new_page()
            self.record_header()
        if row.out_of_range:
            self.canvas.setFillColor(colors.mistyrose)
            self.canvas.rect(LEFT - 1 * mm, self.y - 1.5 * mm, RIGHT - LEFT + 2 * mm, ROW_HEIGHT, stroke=0, fill=1)
            self.canvas.setFillColor(colors.black)
        self.canvas.setFont("Helvetica", 8)
        values = (
            str(row.car_number),
            row.product[:30],
            row.temperature,
            row.defrost_start,
            row.consumption_start,
            row.consumption_end,
            row.observations[:25],
        )
        for (_, x), value in zip(RECORD_COLUMNS, values):
            self.canvas.drawString(x, self.y, value)
        self.y -= ROW_HEIGHT

    def finish(self) -> bytes:
        self.footer()
        self.canvas.showPage()
        self.canvas.save()
        return self.buffer.getvalue()


def render_form_pdf(document: FormDocument) -> bytes:
    """Disegna il documento e ritorna i byte del PDF"""
    pdf = _PdfWriter(document)

    pdf.canvas.setFillColor(colors.darkblue)
    pdf.line(f"Temperature Control Form - {document.form_number}", font="Helvetica-Bold", size=16, step=10 * mm)
    pdf.canvas.setFillColor(colors.black)

    # Informazioni generali
    pdf.line(f"Destination: {document.destination}", font="Helvetica-Bold")
    pdf.line(f"Defrost date: {document.defrost_date}")
    pdf.line(f"Production date: {document.production_date}")
    pdf.line(f"Status: {document.status}", font="Helvetica-Bold")
    pdf.line(f"Created by: {document.created_by}")
    pdf.line(f"Created at: {document.created_at}")

    if document.reviewed_by is not None:
        pdf.section("Review")
        pdf.line(f"Reviewed by: {document.reviewed_by}")
        pdf.line(f"Reviewed at: {document.reviewed_at}")
        if document.review_notes:
            pdf.line(f"Notes: {document.review_notes}")

    pdf.section("Temperature Records")
    pdf.ensure_space(2 * ROW_HEIGHT)
    pdf.record_header()
    for row in document.records:
        pdf.record_row(row)

    if document.alert_messages:
        pdf.section(f"Alerts ({len(document.alert_messages)})")
        for message in document.alert_messages:
            pdf.canvas.setFillColor(colors.darkred)
            pdf.line(message, size=9)
        pdf.canvas.setFillColor(colors.black)

    if document.observations:
        pdf.section("General Observations")
        for paragraph in document.observations.splitlines():
            pdf.line(paragraph)

    return pdf.finish()
