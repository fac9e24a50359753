from datetime import datetime
from io import BytesIO
from flask import current_app
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from cesi.models import Pickup, Report, PickupStatus
from cesi.services.storage import stored_uploads, REPORTS_FOLDER
from utils.db import atomic

STATUS_LABELS = {
    PickupStatus.pending: "Pendiente",
    PickupStatus.complete: "Completa",
    PickupStatus.cancelled: "Cancelada",
}


def render_pickups_pdf(tutor, pickups):
    """Builds the PDF summary of ``pickups`` and returns its bytes."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=letter, title=f"Reporte de recogidas - {tutor.name}")
    styles = getSampleStyleSheet()
    elements = []

    counts = {status: 0 for status in PickupStatus}
    for p in pickups:
        counts[p.status] += 1

    elements.append(Paragraph(f"Reporte de recogidas - {tutor.name}", styles["Title"]))
    elements.append(Paragraph(f"Fecha: {datetime.utcnow().strftime('%d/%m/%Y %H:%M')}", styles["Normal"]))
    elements.append(Paragraph(
        "Resumen: " + " | ".join(f"{STATUS_LABELS[s]} {counts[s]}" for s in PickupStatus),
        styles["Normal"],
    ))
    elements.append(Spacer(1, 12))

    data = [["#", "Alumno", "Responsable", "Estatus", "Fecha", "Observaciones"]]
    for p in pickups:
        data.append([
            str(p.id),
            p.student.name if p.student else "-",
            p.guardian.name if p.guardian else "-",
            STATUS_LABELS[p.status],
            p.created_at.strftime("%d/%m/%Y %H:%M") if p.created_at else "-",
            p.observation or "",
        ])

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.lightgrey),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('ALIGN', (1, 1), (-1, -1), 'LEFT'),
    ]))
    elements.append(table)

    doc.build(elements)
    return buffer.getvalue()


def generate_report(tutor):
    """Renders every pickup of ``tutor``, stores the file and records it."""
    pickups = (
        Pickup.query.filter_by(tutor_id=tutor.id)
        .order_by(Pickup.created_at, Pickup.id)
        .all()
    )
    content = render_pickups_pdf(tutor, pickups)
    filename = f"reporte_recogidas_{tutor.id}_{datetime.utcnow().strftime('%Y%m%d%H%M%S')}.pdf"

    with stored_uploads() as uploads, atomic() as session:
        report = Report(
            report_pdf=uploads.store_bytes(content, REPORTS_FOLDER, filename),
            tutor_id=tutor.id,
        )
        session.add(report)

    current_app.logger.info("Generated report %s with %d pickups for tutor %s",
                            report.report_pdf, len(pickups), tutor.id)
    return report, content
