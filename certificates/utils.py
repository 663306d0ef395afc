import io
import logging
import uuid

import qrcode
from django.conf import settings
from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import inch
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)


def generate_certificate_number(when=None):
    """CERT-YYYYMMDD-<8 hex>. Uniqueness is enforced by the database column."""
    when = when or timezone.now()
    return f"CERT-{timezone.localtime(when).strftime('%Y%m%d')}-{uuid.uuid4().hex[:8].upper()}"


def normalize_certificate_number(value):
    return (value or "").strip().upper()


def build_verification_url(certificate_number):
    return f"{settings.FRONTEND_URL}/verify?id={certificate_number}"


def make_qr_png(data):
    qr = qrcode.QRCode(version=1, error_correction=qrcode.constants.ERROR_CORRECT_H, box_size=10, border=2)
    qr.add_data(data)
    qr.make(fit=True)
    buf = io.BytesIO()
    qr.make_image(fill_color="#0b132b", back_color="white").save(buf, format="PNG")
    buf.seek(0)
    return buf


def format_date(value):
    if value is None:
        return ""
    if hasattr(value, "hour"):
        value = timezone.localtime(value)
    return value.strftime("%d %B %Y")


def generate_certificate_pdf(application):
    """Render a landscape A4 certificate with a QR code pointing at the verification page."""
    buffer = io.BytesIO()
    page_size = landscape(A4)
    p = canvas.Canvas(buffer, pagesize=page_size)
    p.setTitle(f"Certificate {application.certificate_number}")
    width, height = page_size

    # Border
    p.setStrokeColor(colors.HexColor("#1e3a8a"))
    p.setLineWidth(6)
    p.rect(0.4 * inch, 0.4 * inch, width - 0.8 * inch, height - 0.8 * inch, fill=False, stroke=True)
    p.setStrokeColor(colors.HexColor("#d4a017"))
    p.setLineWidth(2)
    p.rect(0.55 * inch, 0.55 * inch, width - 1.1 * inch, height - 1.1 * inch, fill=False, stroke=True)

    # Heading
    p.setFillColor(colors.HexColor("#1e3a8a"))
    p.setFont("Helvetica-Bold", 34)
    p.drawCentredString(width / 2, height - 1.5 * inch, "CERTIFICATE OF INTERNSHIP")
    p.setFont("Helvetica", 13)
    p.setFillColor(colors.HexColor("#6b7280"))
    p.drawCentredString(width / 2, height - 1.9 * inch, settings.PORTAL_NAME.upper())

    # Recipient
    p.setFillColor(colors.black)
    p.setFont("Helvetica", 14)
    p.drawCentredString(width / 2, height - 2.6 * inch, "This is to certify that")
    p.setFont("Helvetica-Bold", 30)
    p.drawCentredString(width / 2, height - 3.2 * inch, application.full_name.upper())

    p.setFont("Helvetica", 14)
    p.drawCentredString(width / 2, height - 3.7 * inch, f"of {application.college_name}")
    p.drawCentredString(
        width / 2, height - 4.1 * inch,
        f"has successfully completed the internship programme in {application.internship_domain}",
    )
    if application.completion_date:
        p.drawCentredString(
            width / 2, height - 4.5 * inch, f"completed on {format_date(application.completion_date)}"
        )

    # Details
    p.setFont("Helvetica", 11)
    p.setFillColor(colors.HexColor("#374151"))
    p.drawString(1 * inch, 1.5 * inch, f"Certificate No: {application.certificate_number}")
    p.drawString(1 * inch, 1.25 * inch, f"Issued on: {format_date(application.certificate_issued_at)}")

    # QR
    verification_url = build_verification_url(application.certificate_number)
    qr_size = 1.3 * inch
    p.drawImage(
        ImageReader(make_qr_png(verification_url)),
        width - 1 * inch - qr_size,
        0.9 * inch,
        width=qr_size,
        height=qr_size,
        preserveAspectRatio=True,
        mask="auto",
    )
    p.setFont("Helvetica", 8)
    p.drawRightString(width - 1 * inch, 0.75 * inch, "Scan to verify")

    p.showPage()
    p.save()

    buffer.seek(0)
    logger.info(f"Certificate PDF rendered for {application.certificate_number}")
    return buffer.getvalue()
