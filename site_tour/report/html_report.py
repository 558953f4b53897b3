"""site_tour.report.html_report: HTML report generation with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from site_tour.aggregator import CrawlReport

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


def render_html(
    report: CrawlReport,
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
) -> Path:
    """Render the HTML report from a template and save it at *output_path*.

    Args:
        report: CrawlReport object.
        template_dir: directory holding ``report.html.j2``; *None* uses the bundled one.
        output_path: path of the resulting HTML file.

    Returns:
        Path of the saved HTML file.
    """
    template_dir = Path(template_dir) if template_dir is not None else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template("report.html.j2")

    context: dict[str, Any] = {
        "seed": report.seed,
        "max_depth": report.max_depth,
        "pages": report.pages,
        "errors": report.errors,
        "stats": report.stats,
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path
