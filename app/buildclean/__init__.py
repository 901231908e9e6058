"""buildclean - safe, policy-driven removal of build output."""

__version__ = "0.1.0"
