"""Headless Quilt Renderer - CLI entry point.

Reads a saved block or pattern document (JSON) and renders it to a PNG.
Patterns need the blocks they reference, passed as block document files.

Usage:
    python -m headless <document.json> [-o OUTPUT] [-b BLOCK ...] [-s SIZE]

Examples:
    python -m headless my_block.json
    python -m headless my_block.json -o thumbs/block.png -s 512
    python -m headless my_pattern.json -b star.json -b nine_patch.json -o quilt.png
"""

import sys
import os
import argparse
import logging

# Add editor/src to path so imports work
_src_dir = os.path.dirname(os.path.abspath(__file__))
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

from version import get_version  # noqa: E402


def _default_output(input_path: str) -> str:
    stem = os.path.splitext(os.path.basename(input_path))[0]
    return os.path.join(os.getcwd(), f"{stem}.png")


def _load_blocks(paths) -> dict:
    """Load block documents keyed by block id

    Raises:
        ValueError: If a file holds a pattern instead of a block
    """
    from models.document import Block
    from services.persistence import load_document

    blocks = {}
    for path in paths:
        document = load_document(path)
        if not isinstance(document, Block):
            raise ValueError(f"{path} is not a block document")
        blocks[document.id] = document
    return blocks


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='headless',
        description='Render quilt block and pattern documents to PNG images (headless).',
    )
    parser.add_argument(
        'input_file',
        help='Path to a saved block or pattern document (JSON).',
    )
    parser.add_argument(
        '-o', '--output',
        default=None,
        help='Output PNG path (default: <input name>.png in the current directory).',
    )
    parser.add_argument(
        '-b', '--block',
        action='append',
        default=[],
        help='Block document used by a pattern; repeat for each block.',
    )
    parser.add_argument(
        '-s', '--size',
        type=int,
        default=None,
        help='Block thumbnail side, or pixels per pattern cell.',
    )
    parser.add_argument(
        '-c', '--config',
        default=None,
        help='Editor config file (default: ~/.quilt_block_editor/config.json).',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging.',
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {get_version()}',
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    from utils.config import load_config
    from utils.logger import configure_logging

    config = load_config(args.config)
    configure_logging(logging.DEBUG if args.verbose else config.log_level)
    logger = logging.getLogger('Headless')

    input_path = os.path.abspath(args.input_file)
    if not os.path.isfile(input_path):
        print(f"Error: Input file not found: {input_path}")
        return 1
    output_path = os.path.abspath(args.output) if args.output else _default_output(input_path)

    from models.document import Pattern
    from services.headless_renderer import HeadlessRenderer
    from services.persistence import load_document

    document = load_document(input_path)
    renderer = HeadlessRenderer()

    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    if isinstance(document, Pattern):
        blocks = _load_blocks(args.block)
        missing = {i.block_id for i in document.block_instances} - set(blocks)
        if missing:
            logger.warning(f"{len(missing)} block(s) not supplied: {', '.join(sorted(missing))}")
        size = args.size or HeadlessRenderer.BLOCK_PIXELS_IN_PATTERN
        renderer.render_pattern(document, blocks, output_path, size)
    else:
        size = args.size or HeadlessRenderer.OUTPUT_SIZE
        renderer.render_block(document, output_path, size)

    print(f"Rendered {os.path.basename(input_path)} to {output_path}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
