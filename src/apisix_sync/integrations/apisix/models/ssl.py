"""Pydantic model for APISIX SSL certificate bundles."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from apisix_sync.integrations.apisix.models.base import ApisixEntityBase, Labels


class SSL(ApisixEntityBase):
    """APISIX SSL entity model.

    Attributes:
        id: SSL identifier.
        labels: Classification labels.
        snis: Server names the certificate is served for.
        cert: PEM encoded certificate.
        key: PEM encoded private key.
    """

    _entity_name: ClassVar[str] = "ssl"

    id: str = ""
    labels: Labels | None = None
    snis: list[str] = Field(default_factory=list)
    cert: str | None = None
    key: str | None = None
