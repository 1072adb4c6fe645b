"""
Residents App - Community Resident Registry

Resident records (identity, contact, WhatsApp consent) and the access
tokens that belong to them. A resident's payment fields are owned by the
payment status engine in ``apps.payments``; this app only sets the initial
state at registration.

Architecture:
- Models: Resident, Token
- Services: resident_management, token_management
- Views: ResidentViewSet, TokenViewSet, bulk upload
"""
