"""Device intake pricing: match lookup-provider device descriptions to a price catalog."""

__version__ = "0.1.0"
