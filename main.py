import logging
import os
import tempfile

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.background import BackgroundTask

import config
import invoice_generator
from schemas.invoice import (
    CustomerFieldUpdate,
    DraftState,
    FinalizedInvoice,
    HeaderFieldUpdate,
    LineFieldUpdate,
    SubmitResult,
)
from services.session import InvoiceSession

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# --- Application Setup ---
app = FastAPI(
    title="GST invoice builder",
    summary="Assemble a tax invoice line by line and finalize it once it is complete.",
    description="Keeps a single draft invoice (header, customer, line items), recomputes line amounts, GST and totals after every edit, validates the draft before finalizing it and renders the finalized invoice to HTML or PDF.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], # Should be restricted in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One local editor, one draft.
session = InvoiceSession()


# --- Helper Functions ---
def require_finalized_invoice() -> FinalizedInvoice:
    if session.last_invoice is None:
        raise HTTPException(status_code=404, detail="No invoice has been finalized yet.")
    return session.last_invoice


# --- API Endpoints ---
@app.get("/health", include_in_schema=False)
async def health():
    return {"status": "healthy"}


@app.get("/invoice", response_model=DraftState)
async def get_draft():
    """Current draft with per-line amounts and totals."""
    return session.snapshot()


@app.post("/invoice/lines", response_model=DraftState)
async def add_line():
    session.add_line()
    return session.snapshot()


@app.patch("/invoice/lines/{line_id}", response_model=DraftState)
async def update_line(line_id: int, update: LineFieldUpdate):
    """Bad numbers are stored as 0, unknown line ids are ignored."""
    session.update_field(line_id, update.field, update.value)
    return session.snapshot()


@app.delete("/invoice/lines/{line_id}", response_model=DraftState)
async def remove_line(line_id: int):
    """The last remaining line is never removed."""
    session.remove_line(line_id)
    return session.snapshot()


@app.patch("/invoice/header", response_model=DraftState)
async def set_header_field(update: HeaderFieldUpdate):
    session.set_header_field(update.field, update.value)
    return session.snapshot()


@app.patch("/invoice/customer", response_model=DraftState)
async def set_customer_field(update: CustomerFieldUpdate):
    session.set_customer_field(update.field, update.value)
    return session.snapshot()


@app.post("/invoice/reset", response_model=DraftState)
async def reset():
    session.reset()
    return session.snapshot()


@app.post("/invoice/submit", response_model=SubmitResult)
async def submit():
    """Finalizes the draft, or answers 422 with every reason it is incomplete."""
    result = session.submit()
    if not result.success:
        return JSONResponse(status_code=422, content=result.model_dump(mode="json"))
    return result


@app.post("/invoice/preview")
async def preview():
    """Renders the last finalized invoice to HTML for preview."""
    invoice = require_finalized_invoice()
    html = invoice_generator.render_html(invoice)
    return JSONResponse({"html": html})


@app.get("/invoice/pdf")
def generate_pdf():
    """Generates a PDF of the last finalized invoice and returns it as a file response.

    Plain def so the blocking wkhtmltopdf call runs in the threadpool.
    """
    invoice = require_finalized_invoice()
    try:
        pdf_bytes = invoice_generator.render_pdf(invoice)
    except invoice_generator.RenderError as e:
        raise HTTPException(
            status_code=500,
            detail=f"PDF generation failed. Ensure wkhtmltopdf is installed and configured correctly. Error: {e}",
        )

    # A temporary file per request keeps concurrent downloads apart.
    with tempfile.NamedTemporaryFile(delete=False, suffix=".pdf") as temp_pdf:
        temp_pdf.write(pdf_bytes)
        temp_pdf_path = temp_pdf.name

    filename = f"invoice_{invoice.header.invoice_number or 'draft'}.pdf"

    # Clean up the file after the response is sent
    cleanup_task = BackgroundTask(os.remove, temp_pdf_path)

    return FileResponse(
        temp_pdf_path,
        media_type="application/pdf",
        filename=filename,
        background=cleanup_task,
    )
