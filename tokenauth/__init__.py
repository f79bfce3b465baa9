"""Token-based authentication service: password credentials, signed access tokens, opaque refresh tokens."""

__version__ = "1.0.0"
