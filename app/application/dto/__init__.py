"""
Application layer DTOs.
Data Transfer Objects for API requests and responses.
"""

from .base_dto import (
    BaseDTO,
    RequestDTO,
    ResponseDTO,
    HealthCheckResponseDTO,
    ErrorResponseDTO,
)
from .client_dto import (
    CreateClientRequestDTO,
    UpdateClientRequestDTO,
    AddMessageRequestDTO,
    QuoteItemRequestDTO,
    CreateQuoteRequestDTO,
    UpdateQuoteStatusRequestDTO,
    ConvertQuoteRequestDTO,
    MessageResponseDTO,
    QuoteResponseDTO,
    ClientResponseDTO,
)
from .invoice_dto import (
    InvoiceItemRequestDTO,
    CreateInvoiceRequestDTO,
    UpdateInvoiceRequestDTO,
    InvoiceStatusRequestDTO,
    InvoiceResponseDTO,
    InvoiceStatsResponseDTO,
    SendInvoiceResponseDTO,
)

__all__ = [
    # Base DTOs
    "BaseDTO",
    "RequestDTO",
    "ResponseDTO",
    "HealthCheckResponseDTO",
    "ErrorResponseDTO",
    # Client DTOs
    "CreateClientRequestDTO",
    "UpdateClientRequestDTO",
    "AddMessageRequestDTO",
    "QuoteItemRequestDTO",
    "CreateQuoteRequestDTO",
    "UpdateQuoteStatusRequestDTO",
    "ConvertQuoteRequestDTO",
    "MessageResponseDTO",
    "QuoteResponseDTO",
    "ClientResponseDTO",
    # Invoice DTOs
    "InvoiceItemRequestDTO",
    "CreateInvoiceRequestDTO",
    "UpdateInvoiceRequestDTO",
    "InvoiceStatusRequestDTO",
    "InvoiceResponseDTO",
    "InvoiceStatsResponseDTO",
    "SendInvoiceResponseDTO",
]
