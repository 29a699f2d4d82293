"""CBOMkit - Cryptography Bill of Materials generation for source trees."""

__version__ = "0.1.0"
