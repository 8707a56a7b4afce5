"""Bulk asset upload jobs."""

from __future__ import annotations

import logging

from stratify.core.errors import ServiceError, ValidationError
from stratify.core.structured_logging import log_json
from stratify.models.upload import AssetUploadJob, UploadResults
from stratify.services.asset_import import SUPPORTED_EXTENSIONS, parse_spreadsheet, validate_rows
from stratify.services.asset_service import AssetService

logger = logging.getLogger(__name__)

PARSED_PROGRESS = 10
VALIDATED_PROGRESS = 30


class AssetUploadService:
    """Runs one uploaded spreadsheet through parse, validate and create.

    Jobs are kept in memory for the dashboard session only; the newest job is
    the one surfaced to the user.
    """

    def __init__(self, assets: AssetService, max_upload_bytes: int = 10 * 1024 * 1024):
        self.assets = assets
        self.max_upload_bytes = max_upload_bytes
        self.jobs: list[AssetUploadJob] = []

    @property
    def latest(self) -> AssetUploadJob | None:
        return self.jobs[-1] if self.jobs else None

    def accept(self, filename: str, size: int) -> AssetUploadJob:
        """Create a pending job for a file, rejecting unsupported files.

        Raises:
            ValidationError: For unsupported extensions or oversized files
        """
        if not (filename or "").lower().endswith(SUPPORTED_EXTENSIONS):
            raise ValidationError("file", filename, "Unsupported file type. Upload a .csv or .xlsx file.")
        if size > self.max_upload_bytes:
            raise ValidationError("file", filename, "File is too large")
        job = AssetUploadJob(file_name=filename, file_size=size)
        self.jobs.append(job)
        return job

    async def process(
        self,
        job: AssetUploadJob,
        content: bytes,
        scope_filter: int | None,
        created_by: str,
    ) -> AssetUploadJob:
        """Parse, validate and, only if every row is valid, create the assets.

        An invalid batch ends the job as failed without creating anything.
        Row creation failures are recorded per row and do not stop the batch.
        """
        job.start()
        try:
            sheet = parse_spreadsheet(job.file_name, content)
        except ValidationError as exc:
            job.fail(UploadResults(total=0, processed=0, errors=[exc.message]))
            log_json(logger, logging.WARNING, "upload_rejected", job_id=job.id, error=exc.message)
            return job
        job.advance(PARSED_PROGRESS)

        validation = validate_rows(sheet)
        job.validation = validation
        job.advance(VALIDATED_PROGRESS)
        if not validation.is_valid:
            job.fail(
                UploadResults(
                    total=validation.total_rows,
                    processed=0,
                    errors=[str(issue) for issue in validation.errors],
                )
            )
            log_json(
                logger,
                logging.WARNING,
                "upload_validation_failed",
                job_id=job.id,
                total_rows=validation.total_rows,
                valid_rows=validation.valid_rows,
                error_count=len(validation.errors),
            )
            return job

        processed = 0
        errors: list[str] = []
        total = len(validation.drafts)
        for index, draft in enumerate(validation.drafts, start=1):
            draft.created_by = created_by
            try:
                await self.assets.create(draft, scope_filter)
                processed += 1
            except ServiceError as exc:
                errors.append(f"{draft.name}: {exc.message}")
            job.advance(VALIDATED_PROGRESS + (100 - VALIDATED_PROGRESS) * index // total)

        job.complete(UploadResults(total=validation.total_rows, processed=processed, errors=errors))
        log_json(
            logger,
            logging.INFO,
            "upload_completed",
            job_id=job.id,
            total=validation.total_rows,
            processed=processed,
            failed=len(errors),
        )
        return job

    async def upload(
        self,
        filename: str,
        content: bytes,
        scope_filter: int | None,
        created_by: str,
    ) -> AssetUploadJob:
        job = self.accept(filename, len(content))
        return await self.process(job, content, scope_filter, created_by)
