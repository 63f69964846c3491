"""File-backed collaborators for the lifecycle manager."""

from signoff.store.artifacts import StubArtifactWriter
from signoff.store.files import ProjectLayout, StateFileError
from signoff.store.governance import FileGovernanceStore
from signoff.store.initiatives import FileInitiativeStore

__all__ = [
    "FileGovernanceStore",
    "FileInitiativeStore",
    "ProjectLayout",
    "StateFileError",
    "StubArtifactWriter",
]
