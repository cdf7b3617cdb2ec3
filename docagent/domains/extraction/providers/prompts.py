"""
Prompt templates for the provider adapters.
"""

from __future__ import annotations

from ..mime import MimeType

__all__ = ["CLOUD_EXTRACTION_PROMPT", "LOCAL_SYSTEM_PROMPT", "build_user_prompt"]

CLOUD_EXTRACTION_PROMPT = """Extract structured data from this document as JSON:
{
  "type": "invoice" | "receipt" | "bank_statement",
  "vendor": "company name",
  "amount": total_amount_number,
  "date": "YYYY-MM-DD",
  "items": [{"description": "...", "total": number}]
}

Only respond with valid JSON, no markdown formatting."""

LOCAL_SYSTEM_PROMPT = """Extract document data as JSON.

Schema:
{"type":"receipt"|"invoice"|"bank_statement"|"other","vendor":"string","amount":number,"date":"YYYY-MM-DD","items":[{"description":"string","total":number}]}

Classification:
- receipt = purchase from store/restaurant (has items, subtotal, tax, total)
- invoice = bill for services/goods (has invoice number, amount due)
- bank_statement = bank account transactions (has account number, balance)
- other = none of the above

Amount rules by type:
- receipt: subtotal + tax (IGNORE payment lines like "Credit", "Cash", "Card")
- invoice: "Amount Due" or "Total Due" or "Balance Due"
- bank_statement: ending balance (can be positive or negative)
- other: the main total amount shown

General rules:
- items = line items (products, services, transactions)
- date in YYYY-MM-DD format
- Use the OCR text below as the primary source for text and numbers
- The image is for layout context only"""


def build_user_prompt(ocr_text: str, mime_type: MimeType) -> str:
    """User prompt carrying OCR text, or a direct instruction when there is none."""
    if ocr_text:
        return (
            f"OCR Text (use this for accurate text/numbers):\n{ocr_text}\n\n"
            "Extract structured data from this document."
        )
    kind = "image" if mime_type.is_image else "document"
    return f"Extract structured data from this {kind}."
