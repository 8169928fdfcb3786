"""Command line interface for PdfIt."""
