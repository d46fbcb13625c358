"""Exceptions raised by gradlegraph."""

from __future__ import annotations


class GradleGraphError(Exception):
    """Base class for gradlegraph errors."""


class ExternalPathError(GradleGraphError, ValueError):
    """An artifact path does not have the group/artifact/version/hash/file layout."""


class ReportConflictError(GradleGraphError):
    """Two partial reports disagree about the same project root or external node."""


class SnapshotError(GradleGraphError):
    """A host snapshot document is malformed."""


class IntrospectionError(GradleGraphError):
    """The host could not report part of its model."""
