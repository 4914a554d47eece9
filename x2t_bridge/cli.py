"""Command-line interface for x2t-bridge.

WHY: Converting a document to the editor's bin format (or back) should not
require running the HTTP server. The CLI wires the lifecycle, orchestrator
and a directory delivery together behind four subcommands.

HOW: argparse with subcommands. Each conversion runs via asyncio.run().
Status messages go to stderr; files are written next to the input or to
--output-dir.

RULES:
- to-bin: writes <name>.bin and the extracted media under <name>_media/
- from-bin: writes <base>.<ext>; asks before overwriting unless --force
- formats: prints the supported extensions and output format codes
- serve: runs the HTTP API with uvicorn
- Errors print "Error: <message>" to stderr and exit with status 1
- A declined overwrite is reported as cancelled, not as an error
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from x2t_bridge.blobs import BlobRegistry
from x2t_bridge.config import API_HOST, API_PORT
from x2t_bridge.core.formats import DOCUMENT_CATEGORIES, OUTPUT_FORMATS, media_info
from x2t_bridge.delivery import DirectoryDelivery
from x2t_bridge.engine.lifecycle import EngineLifecycle
from x2t_bridge.errors import X2TError
from x2t_bridge.orchestrator import DEFAULT_TARGET_FORMAT, ConversionOrchestrator


def _status(msg: str) -> None:
    """Print a status message to stderr (stdout stays pipeable)."""
    print(msg, file=sys.stderr, flush=True)


def _confirm_overwrite(path: Path) -> bool:
    answer = input("{} exists. Overwrite? [y/N] ".format(path))
    return answer.strip().lower() in ("y", "yes")


def _resolve_output_dir(input_path: Path, output_dir: Optional[str]) -> Path:
    target = Path(output_dir).resolve() if output_dir else input_path.parent
    if not target.is_dir():
        print("Error: Output directory does not exist: {}".format(target), file=sys.stderr)
        sys.exit(1)
    return target


async def _to_bin(args: argparse.Namespace, lifecycle: EngineLifecycle) -> None:
    input_path = Path(args.input_file).resolve()
    if not input_path.is_file():
        print("Error: File not found: {}".format(input_path), file=sys.stderr)
        sys.exit(1)
    output_dir = _resolve_output_dir(input_path, args.output_dir)

    blobs = BlobRegistry()
    orchestrator = ConversionOrchestrator(lifecycle, blobs=blobs)

    _status("Converting {}...".format(input_path.name))
    result = await orchestrator.convert_file(input_path)

    bin_path = output_dir / "{}.bin".format(result.file_name)
    bin_path.write_bytes(result.bin)
    _status("  Saved: {} ({}, {} bytes)".format(bin_path.name, result.document_type.value, len(result.bin)))

    if result.media:
        media_dir = output_dir / "{}_media".format(result.file_name)
        media_dir.mkdir(exist_ok=True)
        for relative_path, url in sorted(result.media.items()):
            blob = blobs.get(url)
            if blob is None:
                continue
            target = media_dir / Path(relative_path).name
            target.write_bytes(blob.data)
        _status("  Extracted {} media file(s) to {}".format(len(result.media), media_dir.name))


async def _from_bin(args: argparse.Namespace, lifecycle: EngineLifecycle) -> None:
    input_path = Path(args.input_file).resolve()
    if not input_path.is_file():
        print("Error: File not found: {}".format(input_path), file=sys.stderr)
        sys.exit(1)
    output_dir = _resolve_output_dir(input_path, args.output_dir)

    delivery = DirectoryDelivery(
        output_dir,
        confirm_overwrite=None if args.force else _confirm_overwrite,
    )
    orchestrator = ConversionOrchestrator(lifecycle, delivery=delivery)

    original_name = args.name or input_path.name
    _status("Converting {} to {}...".format(input_path.name, args.to.upper()))
    result = await orchestrator.binary_to_document(
        input_path.read_bytes(), original_name, args.to
    )

    if result.delivered:
        _status("  Saved: {}".format(output_dir / result.file_name))
    else:
        _status("  Save cancelled: {}".format(result.file_name))


def _print_formats() -> None:
    print("Input formats:")
    for extension, category in sorted(DOCUMENT_CATEGORIES.items()):
        print("  {:<6} {:<6} {}".format(extension, category.value, media_info(extension).description))
    print("Output format codes:")
    for name, code in sorted(OUTPUT_FORMATS.items(), key=lambda item: item[1]):
        print("  {:<18} {}".format(name, code))


def _run_conversion(args: argparse.Namespace) -> None:
    lifecycle = EngineLifecycle.from_config()
    handler = _to_bin if args.command == "to-bin" else _from_bin
    try:
        asyncio.run(handler(args, lifecycle))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except X2TError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Separated from main() so tests can inspect the parser without running
    a conversion.
    """
    parser = argparse.ArgumentParser(
        prog="x2t-bridge",
        description="Convert office documents to and from the editor's bin format "
                    "using the x2t conversion engine.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log engine and conversion details to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    to_bin = subparsers.add_parser("to-bin", help="Convert an office document to bin.")
    to_bin.add_argument("input_file", help="Path to the document (docx, xlsx, pptx, ...).")
    to_bin.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )

    from_bin = subparsers.add_parser("from-bin", help="Convert a bin payload to a document.")
    from_bin.add_argument("input_file", help="Path to the bin payload.")
    from_bin.add_argument(
        "--to",
        default=DEFAULT_TARGET_FORMAT,
        help="Target format name, e.g. DOCX, XLSX, PDF (default: %(default)s).",
    )
    from_bin.add_argument(
        "--name",
        default=None,
        help="Original document file name used to name the output "
             "(default: the bin file name).",
    )
    from_bin.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save the document (default: same as input file).",
    )
    from_bin.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing output file without asking.",
    )

    subparsers.add_parser("formats", help="List supported formats and output codes.")

    serve = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default=API_HOST, help="Bind address (default: %(default)s).")
    serve.add_argument("--port", type=int, default=API_PORT, help="Port (default: %(default)s).")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m x2t_bridge`` and the x2t-bridge script.

    argv=None means use sys.argv; an explicit list is for testing.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "formats":
        _print_formats()
    elif args.command == "serve":
        from x2t_bridge.server.app import run_api

        run_api(host=args.host, port=args.port)
    else:
        _run_conversion(args)


if __name__ == "__main__":
    main()
