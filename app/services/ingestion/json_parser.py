"""JSONParser — accepts the same nested payload as POST /import, from a file."""

import json
import logging

from app.schemas.imports import BulkImportRequest
from app.services.ingestion.base import BaseParser, ParseError

logger = logging.getLogger(__name__)


class JSONParser(BaseParser):
    def parse(self, data: bytes, filename: str) -> BulkImportRequest:
        text = self.decode(data, filename)
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ParseError(f"File {filename!r} is not valid JSON: {exc}") from exc

        if not isinstance(payload, dict) or not isinstance(payload.get("procedures"), list):
            raise ParseError(
                f"File {filename!r} must contain an object with a 'procedures' array"
            )

        request = self.validate(payload, filename)
        logger.info(
            "JSONParser: parsed %d procedures from %s", len(request.procedures), filename
        )
        return request
