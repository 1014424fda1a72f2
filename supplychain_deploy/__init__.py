"""Deploy the blockchain supply-chain application onto Azure."""

__version__ = "0.1.0"
