import logging
import os

import pdfkit
from jinja2 import Environment, FileSystemLoader, select_autoescape

import config
from schemas.invoice import FinalizedInvoice
from services.calculator import format_amount, line_amount, line_tax

logger = logging.getLogger(__name__)

env = Environment(
    loader=FileSystemLoader(config.TEMPLATES_DIR),
    autoescape=select_autoescape(["html"]),
)

PDF_OPTIONS = {
    "enable-local-file-access": "",
    # UTF-8 so the rupee sign survives
    "encoding": "UTF-8",
}


class RenderError(RuntimeError):
    """PDF generation failed, usually because wkhtmltopdf is missing."""


def get_pdfkit_config():
    if not os.path.exists(config.WKHTMLTOPDF_PATH):
        logger.warning(
            "wkhtmltopdf not found at configured path: %s, relying on PATH",
            config.WKHTMLTOPDF_PATH,
        )
        return None
    return pdfkit.configuration(wkhtmltopdf=config.WKHTMLTOPDF_PATH)


def invoice_context(invoice: FinalizedInvoice) -> dict:
    """Flatten a finalized invoice into the template's variables."""
    return {
        "currency": config.CURRENCY_SYMBOL,
        "header": invoice.header,
        "customer": invoice.customer,
        "items": [
            {
                "description": item.description,
                "quantity": item.quantity,
                "unit_price": format_amount(item.unit_price),
                "tax_rate": item.tax_rate,
                "amount": format_amount(line_amount(item)),
                "tax": format_amount(line_tax(item)),
            }
            for item in invoice.items
        ],
        "totals": invoice.totals,
        "created_at": invoice.created_at.isoformat(),
    }


def render_html(invoice: FinalizedInvoice) -> str:
    template = env.get_template("invoice_template.html")
    return template.render(invoice_context(invoice))


def render_pdf(invoice: FinalizedInvoice) -> bytes:
    html = render_html(invoice)
    try:
        return pdfkit.from_string(
            html,
            False,  # Return as bytes instead of writing to a file directly
            configuration=get_pdfkit_config(),
            options=PDF_OPTIONS,
        )
    except (IOError, OSError) as e:
        logger.error("Error generating PDF for invoice %s: %s", invoice.header.invoice_number, e)
        raise RenderError(str(e)) from e
