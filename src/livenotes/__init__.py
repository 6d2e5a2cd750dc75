"""livenotes — timestamp-synchronized meeting notes."""

__version__ = "0.3.0"
