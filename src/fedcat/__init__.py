"""fedcat - federated metadata catalog."""

__version__ = "0.1.0"
