"""Core logic for Listing Sheet Builder.

The Gradio UI lives in `app.py`. This package contains plain functions and a
small state container that:
- parse pasted `编号：...` text blocks into records
- reconcile the column headers (dynamic or fixed schema)
- import/export records as .xlsx workbooks
"""
