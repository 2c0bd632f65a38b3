"""
Domain services: billing arithmetic, invoice numbering and the
interfaces of the notification and document collaborators.
"""
