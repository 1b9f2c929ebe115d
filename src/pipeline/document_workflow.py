"""
Document Workflow

Load a photographed page, rectify it, save the result as PNG and optionally
hand the saved file to the remote uploader.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from src.common.types import ImageBuffer
from src.rectification.codec import load_image, save_image
from src.rectification.errors import DecodeError
from src.rectification.processor import DocumentRectifier
from src.rectification.types import RectificationStatus
from src.upload.drive import DriveUploader

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = "_rectified.png"
OUTPUT_MIME_TYPE = "image/png"


@dataclass
class WorkflowResult:
    """Outcome of processing one file."""

    input_path: Path
    output_path: Path
    status: RectificationStatus
    message: str
    remote_id: Optional[str] = None


class DocumentWorkflow:
    """End-to-end workflow around the rectification core."""

    def __init__(
        self,
        rectifier: Optional[DocumentRectifier] = None,
        uploader: Optional[DriveUploader] = None,
    ):
        self.rectifier = rectifier or DocumentRectifier()
        self.uploader = uploader

    def process_file(
        self, input_path: Union[str, Path], output_dir: Union[str, Path]
    ) -> WorkflowResult:
        """
        Rectify a single image file.

        Args:
            input_path: Photographed page.
            output_dir: Directory receiving ``<stem>_rectified.png``.

        Returns:
            WorkflowResult with the local output path and, when an uploader is
            configured, the remote file id.

        Raises:
            DecodeError: If the input cannot be read.
            UploadError: If the upload fails.
        """
        input_path = Path(input_path)
        output_path = Path(output_dir) / f"{input_path.stem}{OUTPUT_SUFFIX}"

        image = load_image(input_path)
        try:
            page = ImageBuffer(data=image)
        except ValidationError as e:
            raise DecodeError(f"Unsupported image layout in {input_path}: {e}") from e

        logger.debug(
            f"Loaded {input_path.name}: {page.width}x{page.height}, "
            f"{page.channels} channel(s)"
        )
        result = self.rectifier.rectify(page)
        logger.info(f"{input_path.name}: {result.get_message()}")

        save_image(result.image, output_path)

        remote_id = None
        if self.uploader is not None:
            remote_id = self.uploader.upload_file(
                output_path, output_path.name, OUTPUT_MIME_TYPE
            )

        return WorkflowResult(
            input_path=input_path,
            output_path=output_path,
            status=result.status,
            message=result.get_message(),
            remote_id=remote_id,
        )
