"""Upstream integration services.

Contains clients and business logic for the logistics provider (service
lookup, fee quotes, location master data) and the exchange-rate source.
"""
