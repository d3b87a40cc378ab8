from dataclasses import dataclass
from io import BytesIO
from typing import List, Optional, Protocol, Sequence
from xml.sax.saxutils import escape

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt, Cm
from reportlab.lib import colors
from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from informes.schemas import Event, ParticipantCompany, ReportSubmission, Staff, StaffActivity
from informes.utils.datetime_format import format_timestamp

STAFF_COLUMNS = ["Descrição", "Data/Hora"]
COMPANY_COLUMNS = ["Ação", "Resposta", "Equipe", "Data/Hora"]


class TableRenderer(Protocol):
    extension: str
    media_type: str

    def render_table(
        self,
        columns: Sequence[str],
        rows: Sequence[Sequence[str]],
        title: str,
        subtitle: str = "",
        column_weights: Optional[Sequence[float]] = None,
    ) -> bytes: ...


@dataclass
class ExportedDocument:
    filename: str
    content: bytes
    media_type: str


class PdfTableRenderer:
    """Tabela simples em PDF (reportlab)"""
    extension = "pdf"
    media_type = "application/pdf"

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self.styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=self.styles['Normal'],
            fontSize=18,
            leading=22,
            fontName='Helvetica-Bold',
            spaceAfter=6,
        ))
        self.styles.add(ParagraphStyle(
            name='ReportSubtitle',
            parent=self.styles['Normal'],
            fontSize=11,
            textColor=HexColor('#646464'),
            spaceAfter=6,
        ))
        self.styles.add(ParagraphStyle(
            name='TableHead',
            parent=self.styles['Normal'],
            fontSize=10,
            fontName='Helvetica-Bold',
            textColor=colors.white,
        ))
        self.styles.add(ParagraphStyle(
            name='TableCell',
            parent=self.styles['Normal'],
            fontSize=9,
            leading=11,
        ))

    def render_table(self, columns, rows, title, subtitle="", column_weights=None) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=1.4 * cm,
            rightMargin=1.4 * cm,
            topMargin=1.5 * cm,
            bottomMargin=1.5 * cm,
            title=title,
        )

        story = [Paragraph(escape(title), self.styles['ReportTitle'])]
        if subtitle:
            story.append(Paragraph(escape(subtitle), self.styles['ReportSubtitle']))
        story.append(Spacer(1, 0.2 * cm))

        # Paragraph nas células para quebrar textos longos
        data = [[Paragraph(escape(col), self.styles['TableHead']) for col in columns]]
        for row in rows:
            data.append([Paragraph(escape(str(cell)), self.styles['TableCell']) for cell in row])

        weights = list(column_weights or [1] * len(columns))
        total = sum(weights)
        table = Table(data, colWidths=[doc.width * w / total for w in weights], repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), HexColor('#2980b9')),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, HexColor('#f5f5f5')]),
            ('GRID', (0, 0), (-1, -1), 0.25, HexColor('#cccccc')),
            ('TOPPADDING', (0, 0), (-1, -1), 4),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
        ]))
        story.append(table)

        doc.build(story)
        return buffer.getvalue()


def set_run_font(run, font_size: float, bold: bool = False):
    run.font.size = Pt(font_size)
    run.font.name = "Calibri"
    run.bold = bold


class DocxTableRenderer:
    """Mesma tabela em Word (.docx)"""
    extension = "docx"
    media_type = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    def render_table(self, columns, rows, title, subtitle="", column_weights=None) -> bytes:
        doc = Document()

        section = doc.sections[0]
        section.page_width = Cm(21.0)
        section.page_height = Cm(29.7)
        section.left_margin = Cm(1.4)
        section.right_margin = Cm(1.4)

        title_para = doc.add_paragraph()
        title_para.alignment = WD_ALIGN_PARAGRAPH.LEFT
        set_run_font(title_para.add_run(title), 18, bold=True)

        if subtitle:
            set_run_font(doc.add_paragraph().add_run(subtitle), 11)

        table = doc.add_table(rows=1, cols=len(columns))
        table.style = "Table Grid"
        for cell, col in zip(table.rows[0].cells, columns):
            cell.text = ""
            set_run_font(cell.paragraphs[0].add_run(col), 10, bold=True)

        for row in rows:
            cells = table.add_row().cells
            for cell, value in zip(cells, row):
                cell.text = ""
                set_run_font(cell.paragraphs[0].add_run(str(value)), 9)

        if column_weights:
            usable = 21.0 - 2.8
            total = sum(column_weights)
            for i, weight in enumerate(column_weights):
                for cell in table.columns[i].cells:
                    cell.width = Cm(usable * weight / total)

        buffer = BytesIO()
        doc.save(buffer)
        buffer.seek(0)
        return buffer.getvalue()


RENDERERS = {
    "pdf": PdfTableRenderer,
    "docx": DocxTableRenderer,
}


def get_renderer(fmt: str) -> TableRenderer:
    try:
        return RENDERERS[fmt]()
    except KeyError:
        raise ValueError(f"Formato de exportação não suportado: {fmt}")


def _event_subtitle(event: Optional[Event]) -> str:
    return f"Evento: {event.name if event else 'N/A'}"


def export_staff_report(
    member: Staff,
    activities: List[StaffActivity],
    event: Optional[Event],
    renderer: TableRenderer,
) -> ExportedDocument:
    """Relatório de atividades de um membro da equipe"""
    rows = [[a.description, format_timestamp(a.timestamp)] for a in activities]
    content = renderer.render_table(
        STAFF_COLUMNS,
        rows,
        title=f"Relatório de Atividades: {member.name}",
        subtitle=_event_subtitle(event),
        column_weights=[3, 1],
    )
    return ExportedDocument(
        filename=f"relatorio_equipe_{member.personal_code}.{renderer.extension}",
        content=content,
        media_type=renderer.media_type,
    )


def export_company_report(
    company: ParticipantCompany,
    reports: List[ReportSubmission],
    event: Optional[Event],
    renderer: TableRenderer,
) -> ExportedDocument:
    """Relatório dos informes registrados no estande de uma empresa"""
    rows = [
        [r.report_label, f'"{r.response}"', r.staff_name, format_timestamp(r.timestamp)]
        for r in reports
    ]
    content = renderer.render_table(
        COMPANY_COLUMNS,
        rows,
        title=f"Relatório de Registros: {company.name}",
        subtitle=_event_subtitle(event),
        column_weights=[1.2, 2.6, 1.2, 1.2],
    )
    return ExportedDocument(
        filename=f"relatorio_empresa_{company.booth_code}.{renderer.extension}",
        content=content,
        media_type=renderer.media_type,
    )
