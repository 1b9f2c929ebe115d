"""
Rectify a photographed document page.

Usage:
    # Flatten a photo into results/page_rectified.png
    python scripts/rectify_document.py --input page.jpg

    # Custom stage parameters
    python scripts/rectify_document.py --input page.jpg --config my_config.yaml

    # Upload the rectified PNG to Google Drive afterwards
    GOOGLE_SERVICE_ACCOUNT_JSON="$(cat key.json)" \
        python scripts/rectify_document.py --input page.jpg --upload
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.pipeline.document_workflow import DocumentWorkflow  # noqa: E402
from src.rectification.errors import DecodeError  # noqa: E402
from src.rectification.processor import DocumentRectifier  # noqa: E402
from src.upload.config import load_upload_config  # noqa: E402
from src.upload.credentials import build_credential_provider  # noqa: E402
from src.upload.drive import DriveUploader  # noqa: E402
from src.upload.errors import UploadError  # noqa: E402

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    """Main entry point for document rectification."""
    parser = argparse.ArgumentParser(
        description="Detect a document page in a photo and flatten it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--input", type=str, required=True, help="Input image")
    parser.add_argument(
        "--output", type=str, default="results", help="Output directory"
    )
    parser.add_argument(
        "--config", type=str, default=None, help="Rectification config YAML"
    )
    parser.add_argument(
        "--upload", action="store_true", help="Upload the result to Google Drive"
    )
    parser.add_argument(
        "--upload-config", type=str, default=None, help="Upload config YAML"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    rectifier = DocumentRectifier(
        config_path=Path(args.config) if args.config else None
    )

    uploader = None
    if args.upload:
        upload_config = load_upload_config(
            Path(args.upload_config) if args.upload_config else None
        )
        uploader = DriveUploader(build_credential_provider(upload_config), upload_config)

    workflow = DocumentWorkflow(rectifier=rectifier, uploader=uploader)

    try:
        result = workflow.process_file(Path(args.input), Path(args.output))
    except DecodeError as e:
        logger.error(f"Cannot read input image: {e}")
        sys.exit(1)
    except UploadError as e:
        logger.error(f"Upload failed ({type(e).__name__}): {e}")
        sys.exit(2)

    logger.info(f"Status: {result.status.value} - {result.message}")
    logger.info(f"Saved: {result.output_path}")
    if result.remote_id:
        logger.info(f"Remote file id: {result.remote_id}")


if __name__ == "__main__":
    main()
