"""Git queries for the publish flow."""

from .scm import GitError, SourceControl, SourceControlProtocol

__all__ = ["GitError", "SourceControl", "SourceControlProtocol"]
