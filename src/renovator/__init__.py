"""renovator: triage, approve and merge dependency-update pull requests."""

__version__ = "0.1.0"
