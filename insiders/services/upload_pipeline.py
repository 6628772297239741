import logging
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from insiders.models.customer import CustomerRecord
from insiders.models.errors import BackendError, NoDataFoundError
from insiders.services import csv_loader, response_shapes
from insiders.services.api_client import BackendClient
from insiders.services.field_reconciler import reconcile_rows

logger = logging.getLogger(__name__)

class UploadState(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    SUCCESS = "success"
    FAILURE = "failure"

class UploadResult(BaseModel):
    state: UploadState
    records: List[CustomerRecord] = Field(default_factory=list)
    source: Optional[Literal["backend", "fallback"]] = None
    error: Optional[str] = None
    failure: Optional[Literal["backend", "no_data"]] = None
    status_code: Optional[int] = None

class UploadPipeline:
    """
    One upload: send the file, take rows from the response or, failing that,
    parse the file locally, then reconcile every row.
    A failed run is final; the user picks the file again to retry.
    """

    def __init__(self, client: BackendClient):
        self.client = client
        self.state = UploadState.IDLE

    async def run(self, filename: str, content: bytes, content_type: Optional[str] = None) -> UploadResult:
        self.state = UploadState.UPLOADING
        try:
            result = await self._run(filename, content, content_type)
        except BackendError as e:
            logger.error("Upload of %s failed: %s", filename, e.message)
            result = UploadResult(
                state=UploadState.FAILURE, error=e.message, failure="backend", status_code=e.status_code
            )
        except NoDataFoundError as e:
            logger.warning("Upload of %s produced no rows", filename)
            result = UploadResult(state=UploadState.FAILURE, error=e.message, failure="no_data")

        self.state = result.state
        return result

    async def _run(self, filename: str, content: bytes, content_type: Optional[str]) -> UploadResult:
        response = await self.client.upload_csv(filename, content, content_type)

        rows = response_shapes.extract_rows(response)
        source = "backend"
        if not rows:
            logger.info("Upload response for %s had no rows, parsing the file locally", filename)
            rows = csv_loader.load_fallback_rows(filename, content)
            source = "fallback"

        if not rows:
            raise NoDataFoundError()

        records = reconcile_rows(rows)
        return UploadResult(state=UploadState.SUCCESS, records=records, source=source)
