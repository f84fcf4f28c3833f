"""
Main Output Handler Module.

This module provides the OutputHandler class that persists rendered
invoice documents to disk.

Author: ML Engineering Team
"""

from pathlib import Path
from typing import Optional, Union

from config import get_config
from src.utils.logger import get_logger
from src.utils.helpers import ensure_directory, format_file_size, safe_filename
from src.utils.exceptions import OutputError
from src.renderer.engine import RenderedDocument

# Initialize module logger
logger = get_logger(__name__)


class OutputHandler:
    """
    Saves rendered documents under the output directory.

    Attributes:
        output_dir: Directory for saved documents
        default_filename: Filename used when none is given

    Example:
        >>> handler = OutputHandler()
        >>> path = handler.save(document)  # outputs/invoice.pdf
        >>> handler.save(document, "march.pdf", output_dir="archive")
    """

    def __init__(self, output_dir: Optional[str] = None) -> None:
        """
        Initialize the output handler.

        Args:
            output_dir: Override config for the output directory.
        """
        self.output_dir = Path(output_dir or get_config("paths.output_dir", "outputs"))
        self.default_filename = get_config("output.filename", "invoice.pdf")

        logger.debug(f"OutputHandler initialized (output_dir: {self.output_dir})")

    def save(
        self,
        document: Union[RenderedDocument, bytes],
        filename: Optional[str] = None,
        output_dir: Optional[str] = None
    ) -> str:
        """
        Write a rendered document to disk.

        Args:
            document: Rendered document or raw PDF bytes.
            filename: Output filename. Defaults to the document's own
                filename, then ``output.filename``.
            output_dir: Output directory. If None, uses configured dir.

        Returns:
            Path to the written file.

        Raises:
            OutputError: If the file cannot be written.
        """
        if isinstance(document, RenderedDocument):
            content = document.content
            filename = filename or document.filename
        else:
            content = bytes(document)

        filename = safe_filename(filename or self.default_filename)
        if not filename.lower().endswith(".pdf"):
            filename = f"{filename}.pdf"

        out_dir = Path(output_dir) if output_dir else self.output_dir
        # Relative directories resolve against the working directory at save time
        filepath = (out_dir / filename).absolute()

        try:
            ensure_directory(out_dir)
            filepath.write_bytes(content)
        except OSError as e:
            logger.error(f"Saving document failed: {e}")
            raise OutputError(str(filepath), str(e)) from e

        logger.info(f"Document saved: {filepath} ({format_file_size(len(content))})")
        return str(filepath)
