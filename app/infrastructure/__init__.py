"""
Infrastructure layer for the invoicing service.

This layer contains the implementation details for external systems integration:
- Database (SQLAlchemy)
- Authentication (bearer JWT)
- Email notifications and PDF rendering

The infrastructure layer implements interfaces defined in the domain layer.
"""
