from __future__ import annotations

import argparse
import io
import json
import logging
import sys
from pathlib import Path

from leakview import __version__
from leakview.config import CONFIG_NOT_FOUND, Settings, load_settings
from leakview.display.adapter import DisplayLeakRows
from leakview.display.row_index import RowKind
from leakview.errors import ErrorCode, LeakViewError, handle_exception, is_verbose, set_verbose
from leakview.trace.loader import LeakDocument, load_leak_document, read_leak_file, validate_leak_document


def _build_rows(document: LeakDocument, settings: Settings, group_description: str | None) -> DisplayLeakRows:
    return DisplayLeakRows(
        document.trace,
        instances=document.instances,
        group_description=(
            group_description if group_description is not None else document.group_description
        ),
        colors=settings.colors,
        strings=settings.strings,
        format_datetime=settings.format_datetime,
    )


def _write_output(content: str, out: str | None) -> None:
    if not out:
        print(content)
        return
    out_path = Path(out)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(content, encoding="utf-8")
    except OSError as e:
        handle_exception(e, ErrorCode.E300, str(out_path))
        raise SystemExit(1)
    print(f"Written to {out_path}")


def _cmd_render(args: argparse.Namespace) -> int:
    settings = load_settings(config_file=args.config)
    document = load_leak_document(Path(args.leak_file))
    rows = _build_rows(document, settings, args.group_description)

    if args.format == "text":
        from leakview.render.terminal import print_rows, render_rows
        if args.out:
            from rich.console import Console
            buffer = io.StringIO()
            Console(file=buffer, width=120).print(render_rows(rows.iter_rows()))
            _write_output(buffer.getvalue(), args.out)
        else:
            print_rows(rows.iter_rows())
    elif args.format == "html":
        from leakview.render.html_renderer import render_leak_html
        title = rows.context.group_description or "Leak Trace"
        _write_output(render_leak_html(rows.iter_rows(), title=title), args.out)
    elif args.format == "json":
        rows_data = [row.to_dict() for row in rows.iter_rows()]
        _write_output(json.dumps(rows_data, indent=2, ensure_ascii=False), args.out)

    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    path = Path(args.leak_file)
    errors = validate_leak_document(read_leak_file(path))
    if errors:
        print(f"✗ {path}: {len(errors)} error(s)")
        for error in errors:
            print(f"  {error}")
        return 1
    print(f"✓ {path}: Valid")
    return 0


def _cmd_rows(args: argparse.Namespace) -> int:
    settings = load_settings(config_file=args.config)
    document = load_leak_document(Path(args.leak_file))
    rows = _build_rows(document, settings, None)

    print(f"{'POS':>4}  {'KIND':<17} {'CONNECTOR':<23} INDEX")
    for position in range(rows.count):
        row = rows.index.row(position)
        connector = ""
        if row.kind is RowKind.CONNECTOR:
            connector = rows.connector_type(position).name
        index = getattr(row, "element_index", None)
        if index is None:
            index = getattr(row, "summary_index", "")
        print(f"{position:>4}  {row.kind.name:<17} {connector:<23} {index}")
    return 0


def main() -> None:
    p = argparse.ArgumentParser(
        prog="leakview",
        description="leakview: render leak traces as connector rows with styled text",
    )

    # Global flags
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging and full tracebacks on errors",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    sub = p.add_subparsers(dest="cmd", required=True)

    # render
    p_render = sub.add_parser(
        "render",
        help="Render a leak document as text, HTML or JSON rows",
    )
    p_render.add_argument("leak_file", help="Path to a JSON or YAML leak document")
    p_render.add_argument(
        "--format",
        choices=["text", "html", "json"],
        default="text",
        help="Output format (default: text)",
    )
    p_render.add_argument("--out", help="Write output to this file instead of stdout")
    p_render.add_argument("--config", help="YAML settings file (colors, strings)")
    p_render.add_argument(
        "--group-description",
        default=None,
        help="Header row text (overrides the document's group_description)",
    )
    p_render.set_defaults(func=_cmd_render)

    # validate
    p_val = sub.add_parser(
        "validate",
        help="Validate a leak document against the schema",
    )
    p_val.add_argument("leak_file", help="Path to a JSON or YAML leak document")
    p_val.set_defaults(func=_cmd_validate)

    # rows
    p_rows = sub.add_parser(
        "rows",
        help="List row kinds and connectors per position",
    )
    p_rows.add_argument("leak_file", help="Path to a JSON or YAML leak document")
    p_rows.add_argument("--config", help="YAML settings file (colors, strings)")
    p_rows.set_defaults(func=_cmd_rows)

    args = p.parse_args()

    set_verbose(args.verbose)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        rc = args.func(args)
        raise SystemExit(rc)
    except SystemExit:
        raise
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        raise SystemExit(130)
    except FileNotFoundError as e:
        code = ErrorCode.E001 if e.strerror == CONFIG_NOT_FOUND else ErrorCode.E200
        handle_exception(e, code, e.filename or str(e))
        raise SystemExit(1)
    except LeakViewError as e:
        handle_exception(e, e.code, str(e))
        raise SystemExit(1)
    except Exception as e:
        # Generic exception handler
        if is_verbose():
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
            print("Run with --verbose for full traceback", file=sys.stderr)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
