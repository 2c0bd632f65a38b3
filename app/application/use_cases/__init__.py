"""
Application layer use cases.
Business logic for clients, quotes and invoices.
"""

from .base_use_case import BaseUseCase
from .client_use_cases import (
    CreateClientUseCase,
    GetClientUseCase,
    ListClientsUseCase,
    UpdateClientUseCase,
    DeleteClientUseCase,
    AddClientMessageUseCase,
)
from .invoice_use_cases import (
    CreateInvoiceUseCase,
    GetInvoiceUseCase,
    ListInvoicesUseCase,
    UpdateInvoiceUseCase,
    DeleteInvoiceUseCase,
    SetInvoiceStatusUseCase,
    SweepOverdueInvoicesUseCase,
    DuplicateInvoiceUseCase,
    ComputeInvoiceStatsUseCase,
    SendInvoiceUseCase,
    RenderInvoicePdfUseCase,
)
from .quote_use_cases import (
    CreateQuoteUseCase,
    GetQuoteUseCase,
    UpdateQuoteStatusUseCase,
    ConvertQuoteToInvoiceUseCase,
)

__all__ = [
    "BaseUseCase",
    # Clients
    "CreateClientUseCase",
    "GetClientUseCase",
    "ListClientsUseCase",
    "UpdateClientUseCase",
    "DeleteClientUseCase",
    "AddClientMessageUseCase",
    # Invoices
    "CreateInvoiceUseCase",
    "GetInvoiceUseCase",
    "ListInvoicesUseCase",
    "UpdateInvoiceUseCase",
    "DeleteInvoiceUseCase",
    "SetInvoiceStatusUseCase",
    "SweepOverdueInvoicesUseCase",
    "DuplicateInvoiceUseCase",
    "ComputeInvoiceStatsUseCase",
    "SendInvoiceUseCase",
    "RenderInvoicePdfUseCase",
    # Quotes
    "CreateQuoteUseCase",
    "GetQuoteUseCase",
    "UpdateQuoteStatusUseCase",
    "ConvertQuoteToInvoiceUseCase",
]
