"""Request-forwarding API gateway for the user and product services."""

__version__ = "0.1.0"
