"""
Shared route dependencies for collaborators held on app.state.
"""

from fastapi import Request

from adventure_api.clients.revolut import RevolutClient


def get_payment_client(request: Request) -> RevolutClient:
    return request.app.state.payment_client
