"""Storefront shipping backend.

Brokers the GHN logistics API and a public exchange-rate source for the
storefront frontend. The application follows a modular architecture with
separate concerns for:
- HTTP API routes and request orchestration
- Logistics provider and exchange-rate clients
- Shipping service selection and fee quotation
"""
