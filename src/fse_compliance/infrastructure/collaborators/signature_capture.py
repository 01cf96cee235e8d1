"""Signature capture adapter for drawing-pad image data URLs."""

import base64
import binascii
import re

from fse_compliance.application.ports.collaborators import SignatureCapture

_DATA_URL = re.compile(r"^data:image/(png|jpeg|svg\+xml|webp);base64,(?P<payload>[A-Za-z0-9+/=\s]+)$")


class DataUrlSignatureCapture(SignatureCapture):
    """Accepts ``data:image/...;base64,`` URLs as committed signatures."""

    def __init__(self, max_bytes: int = 2 * 1024 * 1024):
        self._max_bytes = max_bytes

    def commit(self, raw: str) -> str:
        """Validate the drawing and return it unchanged as the handle."""
        if not isinstance(raw, str) or not raw.strip():
            raise ValueError("Signature drawing is empty")

        handle = raw.strip()
        match = _DATA_URL.match(handle)
        if match is None:
            raise ValueError("Signature must be a base64 image data URL")

        try:
            decoded = base64.b64decode(match.group("payload"), validate=False)
        except (binascii.Error, ValueError):
            raise ValueError("Signature image data is not valid base64") from None
        if not decoded:
            raise ValueError("Signature image is empty")
        if len(decoded) > self._max_bytes:
            raise ValueError(f"Signature image exceeds {self._max_bytes} bytes")
        return handle
