"""Utility module for PdfIt."""
