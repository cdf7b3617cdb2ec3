"""
DocAgent - Structured data extraction from receipts, invoices and bank statements.

Example:
    >>> from docagent.domains.extraction import ExtractionConfig, extract_document
    >>> document = await extract_document("receipt.pdf", ExtractionConfig(ai_provider="ollama"))
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
