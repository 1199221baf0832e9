from __future__ import annotations

import argparse
import codecs
import logging
import os
import sys

from rich.console import Console
from rich.table import Table

from byteseek.core.config import EditorConfig
from byteseek.core.editor import Editor
from byteseek.core.errors import ByteseekError
from byteseek.core.results import LineResult, SearchResult


def _int(text: str) -> int:
    """Accept decimal or 0x-prefixed offsets."""
    return int(text, 0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="byteseek",
        description="Find patterns and first/last lines in large files without loading them",
    )
    parser.add_argument("--config", help="YAML config file (chunk_size, delimiter, encoding)")
    parser.add_argument("--chunk-size", type=_int, help="Base scan window size in bytes")
    parser.add_argument("--delimiter", help="Line delimiter; escapes such as \\r\\n are honoured")
    parser.add_argument("--encoding", help="Encoding for text patterns and output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log each window read")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("head", help="Print the first line")
    p.add_argument("path")

    p = sub.add_parser("tail", help="Print the last line")
    p.add_argument("path")

    p = sub.add_parser("find", help="First occurrence of a pattern")
    p.add_argument("path")
    p.add_argument("pattern")
    p.add_argument("--from", dest="start", type=_int, default=0, help="Start offset")
    p.add_argument("--hex", action="store_true", help="Pattern is hex bytes")

    p = sub.add_parser("rfind", help="Last occurrence of a pattern")
    p.add_argument("path")
    p.add_argument("pattern")
    p.add_argument("--until", type=_int, default=None, help="Upper bound offset (exclusive)")
    p.add_argument("--hex", action="store_true", help="Pattern is hex bytes")

    p = sub.add_parser("read", help="Print a byte range")
    p.add_argument("path")
    p.add_argument("offset", type=_int)
    p.add_argument("length", type=_int)
    p.add_argument("--hex", action="store_true", help="Print as hex instead of text")

    p = sub.add_parser("view", help="Open the interactive viewer")
    p.add_argument("path")
    return parser


def load_config(args: argparse.Namespace) -> EditorConfig:
    config = EditorConfig.load(args.config) if args.config else EditorConfig()
    return config.with_overrides(
        chunk_size=args.chunk_size,
        delimiter=args.delimiter,
        encoding=args.encoding,
    )


def _pattern(args: argparse.Namespace, config: EditorConfig) -> bytes:
    if args.hex:
        return bytes.fromhex(args.pattern)
    return args.pattern.encode(config.encoding)


def _print_match(console: Console, result: SearchResult) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("start", justify="right")
    table.add_column("end", justify="right")
    table.add_column("pattern")
    table.add_row(str(result.start), str(result.end), repr(result.pattern))
    console.print(table)


def _print_line(console: Console, ed: Editor, line: LineResult, encoding: str) -> None:
    # Stream in bounded pieces; a single line may be the whole file
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
    step = ed.config.chunk_size * 64
    parts: list[str] = []
    pos = line.start
    while pos < line.end:
        data = ed.read(pos, min(step, line.end - pos))
        if not data:
            break
        pos += len(data)
        parts.append(decoder.decode(data, final=pos >= line.end))
        if len(parts) >= 16:
            console.out("".join(parts), end="", highlight=False)
            parts.clear()
    parts.append(decoder.decode(b"", final=True))
    console.out("".join(parts), highlight=False)


def run(args: argparse.Namespace, console: Console) -> int:
    config = load_config(args)
    if args.command == "view":
        from byteseek.app import ByteseekApp

        ByteseekApp(args.path, config).run()
        return 0

    with Editor.open(args.path, config=config) as ed:
        if args.command == "head":
            _print_line(console, ed, ed.get_first_line(), config.encoding)
            return 0
        if args.command == "tail":
            _print_line(console, ed, ed.get_last_line(), config.encoding)
            return 0
        if args.command == "read":
            data = ed.read(args.offset, args.length)
            if args.hex:
                console.print(data.hex(" "), markup=False, highlight=False)
            else:
                console.print(data.decode(config.encoding, errors="replace"), markup=False, highlight=False)
            return 0

        needle = _pattern(args, config)
        if args.command == "find":
            result = ed.search_first(needle, args.start)
        else:
            result = ed.search_last(needle, args.until)
        if result is None:
            console.print("no match", style="dim")
            return 1
        _print_match(console, result)
        return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not os.path.exists(args.path):
        print(f"byteseek: file not found: {args.path}", file=sys.stderr)
        return 2

    console = Console()
    try:
        return run(args, console)
    except FileNotFoundError as e:
        print(f"byteseek: {e}", file=sys.stderr)
        return 2
    except (ByteseekError, ValueError) as e:
        print(f"byteseek: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
