"""Design artifacts submitted ahead of an order."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Final

from designrelay.domain.errors import InvalidDesignPayload

PNG_CONTENT_TYPE: Final[str] = "image/png"
PNG_DATA_URL_PREFIX: Final[str] = f"data:{PNG_CONTENT_TYPE};base64,"

_DATA_URL_PREFIX = re.compile(r"^data:image/[A-Za-z0-9.+-]+;base64,")


def _utcnow() -> datetime:
    return datetime.now(UTC)


def encode_png_data_url(content: bytes) -> str:
    return PNG_DATA_URL_PREFIX + base64.b64encode(content).decode("ascii")


@dataclass(eq=False, kw_only=True)
class Design:
    """A stored design; ``image`` holds a base64 data URL."""

    design_id: str
    image: str
    template: str
    created_at: datetime = field(default_factory=_utcnow)

    @property
    def attachment_filename(self) -> str:
        return f"design-{self.design_id}.png"

    def decode_image(self) -> bytes:
        payload = _DATA_URL_PREFIX.sub("", self.image.strip(), count=1)
        if not payload:
            raise InvalidDesignPayload(f"Design {self.design_id} has an empty image payload")
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidDesignPayload(
                f"Design {self.design_id} image is not valid base64"
            ) from exc


_PNG_DATA_URL = re.compile(r"^data:image/png;base64,[A-Za-z0-9+/=]+$")
_MAX_FIELD_LENGTH = 100


def _require_text(name: str, value: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError(f"Valid {name} is required")
    if len(cleaned) > _MAX_FIELD_LENGTH:
        raise ValueError(f"{name} must be a string between 1 and {_MAX_FIELD_LENGTH} characters")
    return cleaned


def new_design(*, design_id: str, image: str, template: str) -> Design:
    """Validate a submission and build the design to store."""

    cleaned_image = image.strip()
    if not _PNG_DATA_URL.match(cleaned_image):
        raise ValueError("Design must be a valid PNG Data URL")
    design = Design(
        design_id=_require_text("designId", design_id),
        image=cleaned_image,
        template=_require_text("template", template),
    )
    design.decode_image()
    return design
