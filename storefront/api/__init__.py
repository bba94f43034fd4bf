"""
HTTP surface.

    POST /checkout                 → 201 {success, message, transactionId, receiptData}
    POST /transactions             → 200 {success}         admin status change
    GET  /transactions[?userId=]   → rows, receipts as JSON strings
    GET  /buyers/{id}, PUT /buyers/{id}
    GET  /products/{id}

Errors are always {"error": message}.
"""

from storefront.api._services import Services, build_services, get_services
from storefront.api._app import create_app

__all__ = ("Services", "build_services", "get_services", "create_app")
