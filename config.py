import os

# --- Configuration ---
# Environment variables keep the app portable between dev, prod and Docker.

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# On Linux/macOS wkhtmltopdf is usually on PATH, in which case pdfkit finds it itself.
WKHTMLTOPDF_PATH = os.getenv("WKHTMLTOPDF_PATH", "/usr/local/bin/wkhtmltopdf")

TEMPLATES_DIR = os.getenv("TEMPLATES_DIR", os.path.join(BASE_DIR, "templates"))

CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₹")
