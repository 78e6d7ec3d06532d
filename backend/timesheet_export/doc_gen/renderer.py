"""
Document renderer - print templates to PDF through headless Chromium

Responsibilities:
1. Render a Jinja2 print template with the export context
2. Print the HTML to PDF in headless Chromium (Playwright)
3. Map paper sizes: folio is passed as explicit 8.5in x 13in dimensions,
   the other sizes by their named format

Chromium runs with ``--no-sandbox`` and ``--disable-web-security`` so
templates can load local assets; this renderer is meant for a trusted
server, not for multi-tenant use.

Test points:
- test_folio_explicit_dimensions: folio always maps to explicit dimensions
- test_render_context: template context rendering
- test_render_failure_wrapped: browser errors surface as RenderFailure
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from ..config import RuntimeConfig, get_config
from ..interfaces import IDocumentRenderer, RenderFailure
from ..models import PaperSize

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

PAPER_FORMATS = {
    PaperSize.A4: "A4",
    PaperSize.LETTER: "Letter",
    PaperSize.LEGAL: "Legal",
}

FOLIO_WIDTH = "8.5in"
FOLIO_HEIGHT = "13in"


def paper_options(paper_size: PaperSize) -> dict[str, str]:
    """Page size arguments for ``page.pdf``"""
    if paper_size is PaperSize.FOLIO:
        return {"width": FOLIO_WIDTH, "height": FOLIO_HEIGHT}
    return {"format": PAPER_FORMATS[paper_size]}


class BrowserRenderer(IDocumentRenderer):
    """Jinja2 + Playwright (Chromium) renderer"""

    def __init__(
        self,
        templates_dir: Path | None = None,
        browser_args: list[str] | None = None,
        timeout: int | None = None,
        print_background: bool | None = None,
        config: RuntimeConfig | None = None,
    ):
        config = config or get_config()
        self.templates_dir = Path(
            templates_dir or config.renderer.templates_dir or DEFAULT_TEMPLATES_DIR
        )
        self.browser_args = list(
            browser_args if browser_args is not None else config.renderer.browser_args
        )
        self.timeout = timeout or config.timeouts.render_sec
        self.print_background = (
            config.renderer.print_background if print_background is None else print_background
        )
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, layout_name: str, paper_size: PaperSize, context: dict[str, Any]) -> bytes:
        html = self.render_html(layout_name, context)
        logger.info(f"Printing {layout_name} ({paper_size.value})")
        return self._print(html, paper_size)

    def render_html(self, layout_name: str, context: dict[str, Any]) -> str:
        """Fill the print template"""
        try:
            template = self.env.get_template(layout_name)
            return template.render(**context)
        except TemplateError as e:
            raise RenderFailure(f"Template {layout_name} failed: {e}") from e

    def _print(self, html: str, paper_size: PaperSize) -> bytes:
        """Print HTML to PDF in headless Chromium"""
        timeout_ms = self.timeout * 1000
        try:
            with sync_playwright() as playwright:
                browser = playwright.chromium.launch(
                    args=self.browser_args,
                    chromium_sandbox=False,
                    timeout=timeout_ms,
                )
                try:
                    page = browser.new_page()
                    page.set_default_timeout(timeout_ms)
                    page.set_content(html, wait_until="networkidle")
                    return page.pdf(
                        print_background=self.print_background,
                        **paper_options(paper_size),
                    )
                finally:
                    browser.close()
        except PlaywrightError as e:
            raise RenderFailure(f"Renderer failed: {e}") from e
