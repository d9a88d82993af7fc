"""Command line entry point: survey templates, list fields and fill forms."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from dotenv import load_dotenv

from .catalog import catalog_stats, load_catalog, save_catalog, survey_documents
from .errors import AcroFillError
from .pipeline import TemplateForm, fill_template, missing_field_report, parse_template
from .surveyor import list_field_names

DEFAULT_CATALOG = Path("mappings") / "fields_rects.json"


def _collect_sources(inputs: Sequence[str]) -> List[Tuple[str, Path]]:
    sources: List[Tuple[str, Path]] = []
    for raw in inputs:
        path = Path(raw)
        if path.is_dir():
            pdfs = sorted(p for p in path.iterdir() if p.is_file() and p.suffix.lower() == ".pdf")
            sources.extend((p.name, p) for p in pdfs)
        else:
            sources.append((path.name, path))
    return sources


def _cmd_survey(args: argparse.Namespace) -> int:
    sources = _collect_sources(args.inputs)
    if not sources:
        print("No PDF files found.", file=sys.stderr)
        return 1
    build = survey_documents(sources, max_workers=args.workers)
    for document_id, error in build.errors.items():
        print(f"ERROR {document_id}: {error}", file=sys.stderr)
    for document_id, skipped in build.skipped.items():
        for entry in skipped:
            print(f"skipped {document_id}: '{entry.name}' ({entry.reason})", file=sys.stderr)
    if len(build.errors) == len(sources):
        return 1

    destination = save_catalog(build.catalog, args.output)
    stats = catalog_stats(build.catalog)
    print(f"Catalog written to {destination}")
    print(f"Unique fields: {stats.unique_fields}")
    print(f"Total occurrences: {stats.total_occurrences}")
    for name in list(build.catalog)[: args.preview]:
        kinds = ", ".join(stats.kinds[name])
        print(f"  {name} ({len(build.catalog[name])}x, types: {kinds})")
    return 0


def _cmd_fields(args: argparse.Namespace) -> int:
    names = list_field_names(args.template)
    if args.json:
        print(json.dumps(names, indent=2, ensure_ascii=False))
    else:
        for name in names:
            print(name)
    return 0


def _cmd_fill(args: argparse.Namespace) -> int:
    payload = json.loads(Path(args.payload).read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        print("Payload must be a JSON object of field names to values.", file=sys.stderr)
        return 2

    if args.catalog:
        template = TemplateForm(pdf_bytes=Path(args.template).read_bytes(), catalog=load_catalog(args.catalog))
    else:
        template = parse_template(args.template)
    result = fill_template(template, payload, canonical=args.canonical, flatten=not args.no_flatten)

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(result.content)
    print(f"Filled PDF written to {output}")
    for name, suggestion in missing_field_report(result, template).items():
        hint = f" (did you mean '{suggestion}'?)" if suggestion else ""
        print(f"missing: {name}{hint}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="acrofill", description="Survey and fill AcroForm PDF templates.")
    sub = parser.add_subparsers(dest="command", required=True)

    survey = sub.add_parser("survey", help="Write the field catalog of one or more templates.")
    survey.add_argument("inputs", nargs="+", help="PDF files or directories containing PDFs")
    survey.add_argument("-o", "--output", default=str(DEFAULT_CATALOG), help="Catalog JSON destination")
    survey.add_argument("--workers", type=int, default=None, help="Documents surveyed in parallel")
    survey.add_argument("--preview", type=int, default=10, help="Number of fields to print")
    survey.set_defaults(func=_cmd_survey)

    fields = sub.add_parser("fields", help="List the field names of a template.")
    fields.add_argument("template")
    fields.add_argument("--json", action="store_true", help="Print a JSON array")
    fields.set_defaults(func=_cmd_fields)

    fill = sub.add_parser("fill", help="Fill a template from a flat JSON payload and flatten it.")
    fill.add_argument("template")
    fill.add_argument("payload", help="JSON object mapping field names to values")
    fill.add_argument("-o", "--output", required=True)
    fill.add_argument("--catalog", help="Catalog JSON giving field kinds")
    fill.add_argument("--canonical", action="store_true", help="Replicate canonical names onto duplicated fields")
    fill.add_argument("--no-flatten", action="store_true", help="Keep the output editable")
    fill.set_defaults(func=_cmd_fill)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except (AcroFillError, OSError, json.JSONDecodeError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
