"""
Pydantic models for the registry browser core.

This module defines the data exchanged between the core components:
- Session state restored from storage or produced by a login
- Package records normalized from the registry response
- Search results with highlight ranges for rendering
- Alert and bootstrap outcome models consumed by the presentation layer

All models use Pydantic for validation, serialization, and type safety.
"""

from __future__ import annotations

from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Session models
# ---------------------------------------------------------------------------


class Session(BaseModel):
    """
    Authenticated identity recognized by the client.

    An absent session (``None``) is the anonymous state. A session is only
    built from storage when both fields are present and the token is valid.
    """

    username: str = Field(
        min_length=1,
        description="Name of the logged-in user.",
    )
    token: str = Field(
        min_length=1,
        description="Bearer token issued by the registry at login.",
    )


class LoginError(BaseModel):
    """
    Inline, field-scoped login failure shown on the login form.
    """

    title: str = Field(default="Unable to login")
    type: str = Field(default="error")
    description: str = Field(
        default="",
        description="Human readable reason, e.g. bad credentials or a transport problem.",
    )


# ---------------------------------------------------------------------------
# Catalog models
# ---------------------------------------------------------------------------


class PackageRecord(BaseModel):
    """
    A package entry of the catalog.

    ``label`` is the registry's ``name`` field renamed; every other field
    sent by the registry is preserved verbatim as an extra attribute.
    """

    model_config = ConfigDict(extra="allow")

    label: str = Field(
        min_length=1,
        description="Catalog-unique display key (the registry package name).",
    )
    version: Any = Field(
        default=None,
        description="Latest published version, exactly as the registry reported it.",
    )
    keywords: Any = Field(
        default=None,
        description="Package keywords as received; non-string entries never match a query.",
    )

    def keyword_values(self) -> List[str]:
        """String keywords of the record; a bare string counts as one keyword."""
        if isinstance(self.keywords, str):
            return [self.keywords]
        if isinstance(self.keywords, (list, tuple)):
            return [k for k in self.keywords if isinstance(k, str)]
        return []


class CatalogLoadFailure(BaseModel):
    """Result of a catalog load that did not produce any records."""

    message: str


# ---------------------------------------------------------------------------
# Search models
# ---------------------------------------------------------------------------


MatchField = Literal["label", "version", "keywords"]


class HighlightRange(BaseModel):
    """One contiguous run of a label, either highlighted or not."""

    start: int
    end: int
    highlighted: bool
    text: str


class MatchResult(BaseModel):
    """A catalog record selected by a query, plus what to render for it."""

    record: PackageRecord
    matched_fields: List[MatchField] = Field(default_factory=list)
    highlight_ranges: List[HighlightRange] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Alert and bootstrap outcome models
# ---------------------------------------------------------------------------


class AlertContent(BaseModel):
    """A user-facing, dismissible description of a non-fatal failure."""

    title: str
    message: str


class BootstrapReady(BaseModel):
    kind: Literal["ready"] = "ready"
    session: Optional[Session] = None
    catalog: List[PackageRecord] = Field(default_factory=list)


class BootstrapDegraded(BaseModel):
    """Bootstrap finished but the catalog could not be loaded."""

    kind: Literal["degraded"] = "degraded"
    session: Optional[Session] = None
    catalog: List[PackageRecord] = Field(default_factory=list)
    alert: AlertContent


BootstrapOutcome = Union[BootstrapReady, BootstrapDegraded]
