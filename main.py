#!/usr/bin/env python3
"""
Invoice Renderer - Main Entry Point.

Renders invoice data files (YAML or JSON, with the same fields as the
invoice form) into paginated PDF documents.

Usage:
    Command Line:
        python main.py --input invoice.yaml
        python main.py --input invoice.json --output ./out/march.pdf --logo logo.png

    Python:
        from main import run_render
        path = run_render("invoice.yaml")

Author: ML Engineering Team
Version: 1.0.0
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import ConfigurationManager
from src.utils.logger import setup_logger_from_config, get_logger
from src.utils.helpers import get_file_extension
from src.utils.exceptions import InvoiceDataError, InvoiceRenderingError

SUPPORTED_EXTENSIONS = {'.yaml', '.yml', '.json'}


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Invoice Renderer - invoice data to paginated PDF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Render with defaults (outputs/invoice.pdf):
        python main.py --input invoice.yaml

    Custom output file and logo:
        python main.py --input invoice.json --output out/march.pdf --logo logo.png
        """
    )

    parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="Invoice data file (.yaml, .yml or .json)"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output PDF file or directory (default: outputs/invoice.pdf)"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    parser.add_argument(
        "--logo", "-l",
        type=str,
        default=None,
        help="Logo image file; overrides any logo in the data file"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log errors"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    config = ConfigurationManager(args.config)
    logger = setup_logger_from_config()

    if args.debug:
        import logging
        logger.setLevel(logging.DEBUG)
        for handler in logger.handlers:
            handler.setLevel(logging.DEBUG)
    elif args.quiet:
        import logging
        logger.setLevel(logging.ERROR)

    logger.info(f"Invoice Renderer {config.get('project.version', '1.0.0')}")
    logger.info(f"Input: {args.input}")
    return config


def load_invoice_data(input_path: str, logo_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Read invoice form data from a YAML or JSON file.

    Args:
        input_path: Path to the data file.
        logo_path: Optional image file whose bytes replace the data's logo.

    Returns:
        Form data mapping.

    Raises:
        FileNotFoundError: If a file doesn't exist.
        InvoiceDataError: If the file type or content is unusable.
    """
    path = Path(input_path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    extension = get_file_extension(path)
    if extension not in SUPPORTED_EXTENSIONS:
        raise InvoiceDataError("input", str(path), f"unsupported file type '{extension}'")

    text = path.read_text(encoding='utf-8')
    try:
        data = json.loads(text) if extension == '.json' else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InvoiceDataError("input", str(path), f"could not parse: {e}") from e

    if not isinstance(data, dict):
        raise InvoiceDataError("input", str(path), "expected a mapping of invoice fields")

    # Allow a top-level "invoice:" wrapper
    if isinstance(data.get('invoice'), dict):
        data = data['invoice']

    if logo_path:
        logo_file = Path(logo_path)
        if not logo_file.exists():
            raise FileNotFoundError(f"Logo file not found: {logo_file}")
        data = {**data, 'logo': logo_file.read_bytes()}

    return data


def run_render(
    input_path: str,
    output_path: Optional[str] = None,
    logo_path: Optional[str] = None
) -> str:
    """
    Render one invoice data file to PDF and save it.

    Args:
        input_path: Invoice data file.
        output_path: Output ``.pdf`` file or directory.
        logo_path: Optional logo image file.

    Returns:
        Path to the saved PDF.
    """
    logger = get_logger(__name__)

    from src.invoice_model import Invoice
    from src.renderer import InvoiceRenderer
    from src.output_handler import OutputHandler

    invoice = Invoice.from_dict(load_invoice_data(input_path, logo_path))
    logger.debug(f"Loaded {invoice!r}")

    document = InvoiceRenderer().render(invoice)

    handler = OutputHandler()
    if output_path is None:
        return handler.save(document)

    output_p = Path(output_path)
    if output_p.suffix.lower() == '.pdf':
        return handler.save(document, filename=output_p.name, output_dir=str(output_p.parent))
    return handler.save(document, output_dir=str(output_p))


def main(argv=None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = None
    try:
        args = parse_arguments(argv)
        initialize_system(args)
        logger = get_logger(__name__)

        saved_path = run_render(args.input, args.output, args.logo)
        logger.info(f"Invoice written to {saved_path}")
        return 0

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except InvoiceRenderingError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130

    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        if args is not None and args.debug:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
