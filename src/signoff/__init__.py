"""signoff-flow: multi-party sign-off workflow for planning artifacts."""

__version__ = "2.1.0"
