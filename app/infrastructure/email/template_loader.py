"""
Email template loader and renderer.
Handles Jinja2 templates for quote and invoice notifications.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from app.domain.models.base import utcnow
from app.domain.services.billing_service import to_major_units

logger = logging.getLogger(__name__)


def format_currency(cents: int) -> str:
    """Format an amount in cents as $1,234.50."""
    return f"${to_major_units(cents):,.2f}"


def format_date(value: Any, format: str = "%Y-%m-%d") -> str:
    if isinstance(value, datetime):
        return value.strftime(format)
    return "" if value is None else str(value)


class EmailTemplateLoader:
    """Loads and renders email templates using Jinja2."""

    def __init__(self, templates_dir: Path | None = None):
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"

        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html"])
        )
        self.env.filters["currency"] = format_currency
        self.env.filters["date"] = format_date

    def render(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render an email template.

        Args:
            template_name: Template file name (e.g., 'invoice_notification.html')
            context: Template context variables
        """
        enhanced_context = {
            **context,
            "current_year": utcnow().year,
        }
        template = self.env.get_template(template_name)
        return template.render(**enhanced_context)

    def render_pair(self, template: str, context: Dict[str, Any]) -> tuple[str, str]:
        """Render the HTML body and its plain-text alternative."""
        html_content = self.render(f"{template}.html", context)
        try:
            text_content = self.render(f"{template}.txt", context)
        except TemplateNotFound:
            logger.debug(f"No text template for {template}, sending HTML only")
            text_content = ""
        return html_content, text_content

    def template_exists(self, template_name: str) -> bool:
        return (self.templates_dir / template_name).exists()
