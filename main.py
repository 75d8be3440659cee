#!/usr/bin/env python3
"""
Fiscal Stamping Engine - Main Entry Point.

This is the main entry point for the fiscal stamping engine. It reads
already-extracted page text and a template definition from disk, runs
the processing pipeline and writes the stamped document.

Usage:
    Command Line:
        python main.py --text factura.txt --template template.json --output stamped.pdf
        python main.py --text factura.txt --template template.json \\
            --original factura.pdf --email proveedor@empresa.mx --json fields.json

    Python:
        from main import run_stamping
        result = run_stamping("factura.txt", "template.json")

Author: ML Engineering Team
Version: 1.0.0
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

# Import project modules
from config import ConfigurationManager
from fiscal_stamp.utils.logger import set_level, setup_logger_from_config, get_logger
from fiscal_stamp.utils.helpers import ensure_directory, validate_file_exists
from fiscal_stamp.utils.exceptions import FiscalStampError, MissingInputFileError


def parse_arguments(argv: Optional[list] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: Argument list; defaults to sys.argv.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Template-Driven Fiscal Extraction & Document Stamping Engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Stamp a document:
        python main.py --text factura.txt --template template.json --output stamped.pdf

    Keep the original as fallback and save the fields:
        python main.py --text factura.txt --template template.json \\
            --original factura.pdf --json outputs/fields.json
        """
    )

    # Input/Output arguments
    parser.add_argument(
        "--text", "-t",
        type=str,
        required=True,
        help="UTF-8 file with the extracted page text"
    )

    parser.add_argument(
        "--template", "-p",
        type=str,
        required=True,
        help="JSON template definition file"
    )

    parser.add_argument(
        "--original",
        type=str,
        default=None,
        help="Original document, returned unchanged if stamping fails"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default="outputs/stamped.pdf",
        help="Stamped document path (default: outputs/stamped.pdf)"
    )

    parser.add_argument(
        "--json",
        type=str,
        default=None,
        help="Also write the extracted fields to this JSON file"
    )

    # Vendor and enrichment
    parser.add_argument("--email", type=str, default="", help="Vendor email")
    parser.add_argument("--user-id", type=str, default="", help="Vendor user id")
    parser.add_argument("--title", type=str, default="", help="Document title")
    parser.add_argument("--summary", type=str, default="", help="Document summary")
    parser.add_argument("--contact", type=str, default="", help="Contact information")

    # Processing options
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    # Logging options
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize the engine with configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    # Load configuration
    config = ConfigurationManager(args.config)

    # Setup logging
    logger = setup_logger_from_config()

    if args.debug:
        set_level("DEBUG")

    logger.info("=" * 60)
    logger.info("FISCAL EXTRACTION & DOCUMENT STAMPING ENGINE")
    logger.info("=" * 60)
    logger.info(f"Version: {config.get('project.version', '1.0.0')}")
    logger.info(f"Text: {args.text}")
    logger.info(f"Template: {args.template}")
    logger.info(f"Output: {args.output}")

    return config


def validate_inputs(args: argparse.Namespace) -> None:
    """
    Check that every input file exists.

    Args:
        args: Parsed command-line arguments.

    Raises:
        MissingInputFileError: If an input file is missing.
    """
    for path in (args.text, args.template, args.original):
        if path is not None and not validate_file_exists(path):
            raise MissingInputFileError(path)


def run_stamping(
    text_path: str,
    template_path: str,
    original_path: Optional[str] = None,
    output_path: Optional[str] = None,
    email: str = "",
    user_id: str = "",
    title: str = "",
    summary: str = "",
    contact: str = "",
    json_path: Optional[str] = None
):
    """
    Run the stamping pipeline on files.

    This is the main programmatic entry point. File reading and writing
    happen here; the pipeline itself works on in-memory values.

    Args:
        text_path: Extracted page text file.
        template_path: JSON template definition file.
        original_path: Optional original document.
        output_path: Where to write the stamped document.
        email: Vendor email.
        user_id: Vendor user id.
        title: Enrichment title.
        summary: Enrichment summary.
        contact: Enrichment contact information.
        json_path: Optional path for the extracted fields as JSON.

    Returns:
        ProcessResult of the run.

    Example:
        >>> result = run_stamping("factura.txt", "template.json", output_path="out.pdf")
        >>> result.fields["RFC"]
    """
    logger = get_logger(__name__)

    # Import pipeline components
    from fiscal_stamp.pipeline import TemplateProcessor, Enrichment
    from fiscal_stamp.rule_engine import VendorContext

    text = Path(text_path).read_text(encoding="utf-8")
    template_json = Path(template_path).read_text(encoding="utf-8")
    original_bytes = Path(original_path).read_bytes() if original_path else b""

    processor = TemplateProcessor()
    result = processor.process(
        original_bytes,
        text,
        template_json,
        VendorContext(email=email, user_id=user_id),
        Enrichment(title=title, summary=summary, contact_information=contact)
    )

    if output_path:
        output_file = Path(output_path)
        ensure_directory(output_file.parent)
        output_file.write_bytes(result.final_bytes)
        logger.info(f"Stamped document: {output_file} ({len(result.final_bytes)} bytes)")

    if json_path:
        json_file = Path(json_path)
        ensure_directory(json_file.parent)
        json_file.write_text(result.to_json(), encoding="utf-8")
        logger.info(f"Fields JSON: {json_file}")

    return result


def main(argv: Optional[list] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = None

    try:
        # Parse command-line arguments
        args = parse_arguments(argv)

        # Initialize system
        initialize_system(args)
        logger = get_logger(__name__)

        # Validate inputs
        validate_inputs(args)

        result = run_stamping(
            text_path=args.text,
            template_path=args.template,
            original_path=args.original,
            output_path=args.output,
            email=args.email,
            user_id=args.user_id,
            title=args.title,
            summary=args.summary,
            contact=args.contact,
            json_path=args.json
        )

        print(result.to_json())

        logger.info("=" * 60)
        logger.info(f"Stamping complete. Confidence: {result.confidence_score}%")
        logger.info("=" * 60)

        return 0 if result.success else 1

    except FiscalStampError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except OSError as e:
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
