"""
Email and notification infrastructure.
Handles email templates, SMTP delivery, and notification dispatch.
"""

from .email_service import EmailService, get_email_service
from .template_loader import EmailTemplateLoader

__all__ = [
    "EmailService",
    "get_email_service",
    "EmailTemplateLoader"
]
