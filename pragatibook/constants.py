from datetime import datetime, timezone

CURRENCY_SYMBOL = "₹"
# fpdf2 core fonts are Latin-1 only, so PDFs spell the currency out.
PDF_CURRENCY_SYMBOL = "Rs."

OTP_MIN = 100000
OTP_MAX = 999999

MIN_PASSWORD_LENGTH = 6

INCHES_PER_FOOT = 12


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
