"""
Invoice mapper for converting between domain entities and database models.
"""

from typing import Optional

from app.domain.models.invoice import Invoice, InvoiceLineItem, InvoiceStatus
from app.infrastructure.db.models import InvoiceModel


class InvoiceMapper:
    """Maps between Invoice domain entity and InvoiceModel database model."""

    def domain_to_model(self, invoice: Invoice, model: Optional[InvoiceModel] = None) -> InvoiceModel:
        """Copy an Invoice onto an InvoiceModel, creating one if needed."""
        if model is None:
            model = InvoiceModel(
                owner_id=invoice.owner_id,
                invoice_number=invoice.invoice_number,
                created_at=invoice.created_at
            )

        model.client_id = invoice.client_id
        model.status = invoice.status.value
        model.client_name = invoice.client_name
        model.company_name = invoice.company_name
        model.email = invoice.email
        model.phone = invoice.phone
        model.items = [item.to_dict() for item in invoice.items]
        model.tax_rate = invoice.tax_rate
        model.subtotal = invoice.subtotal
        model.tax = invoice.tax
        model.total = invoice.total
        model.due_date = invoice.due_date
        model.paid_at = invoice.paid_at
        model.notes = invoice.notes
        return model

    def model_to_domain(self, model: InvoiceModel) -> Invoice:
        """Convert InvoiceModel to Invoice domain entity."""
        invoice = Invoice(
            owner_id=model.owner_id,
            invoice_number=model.invoice_number,
            client_name=model.client_name,
            company_name=model.company_name,
            email=model.email,
            phone=model.phone,
            client_id=model.client_id,
            items=[InvoiceLineItem.from_dict(data) for data in (model.items or [])],
            tax_rate=float(model.tax_rate),
            subtotal=model.subtotal,
            tax=model.tax,
            total=model.total,
            status=InvoiceStatus(model.status),
            due_date=model.due_date,
            notes=model.notes or "",
            paid_at=model.paid_at
        )

        invoice.id = model.id
        invoice.created_at = model.created_at
        invoice.updated_at = model.updated_at
        invoice.version = model.version or 1

        return invoice
