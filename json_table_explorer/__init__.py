"""Core logic for JSON Table Explorer.

The Gradio UI lives in `app.py`. This package contains:
- schema discovery over nested JSON records
- dot-path resolution, per-column filters, sorting and full-text search
- the query pipeline and its debounced scheduler
- the viewport window calculator for virtual scrolling
"""
