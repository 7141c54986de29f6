"""Shoot financials and invoice/PO generation for a content-production studio."""
