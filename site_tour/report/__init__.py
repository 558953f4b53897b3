"""site_tour.report: JSON and HTML renderers for a CrawlReport."""

from __future__ import annotations

from site_tour.report.html_report import DEFAULT_TEMPLATE_DIR, render_html
from site_tour.report.json_report import render_json

__all__ = ["DEFAULT_TEMPLATE_DIR", "render_json", "render_html"]
