"""Neo N3 transactions, witnesses, signers, NEP-6 contracts and signing context."""

__version__ = "0.1.0"