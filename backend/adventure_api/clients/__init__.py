from adventure_api.clients.revolut import PaymentProviderError, RevolutClient
from adventure_api.clients.geocoding import reverse_geocode

__all__ = ["PaymentProviderError", "RevolutClient", "reverse_geocode"]
