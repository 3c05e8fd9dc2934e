#!/usr/bin/env python
"""Main CLI interface for field extraction."""
import argparse
import json
import re
import sys
from pathlib import Path

from pydantic import ValidationError

from fieldfinder.config import setup_logging
from fieldfinder.pipeline import FieldExtractionPipeline
from fieldfinder.tables.document_table import DocumentTable


def load_document(path: str):
    """
    Read a document exported as JSON.

    The file holds ``pages`` (a list of word lists, each word a
    ``{"text", "x", "y"}`` object) and optionally ``tables`` (objects with
    ``rows``, ``x``, ``y`` and ``page``).

    Returns:
        Tuple of (pages, tables)
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    tables = [
        DocumentTable.from_rows(
            table["rows"],
            x=table.get("x", 0.0),
            y=table.get("y", 0.0),
            page=table.get("page", 1),
        )
        for table in data.get("tables", [])
    ]
    return data.get("pages", []), tables


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Find configured fields in positioned document text"
    )

    parser.add_argument(
        "--input",
        "-i",
        required=True,
        type=str,
        help="Path to the document JSON file"
    )

    parser.add_argument(
        "--fields",
        "-f",
        required=True,
        type=str,
        help="Path to the field configuration YAML file"
    )

    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Write found values to this JSON file instead of stdout"
    )

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Path to config file (default: config.yaml)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level (default: from configuration)"
    )

    args = parser.parse_args()

    for path in (args.input, args.fields):
        if not Path(path).exists():
            print(f"Error: File not found: {path}")
            sys.exit(1)

    try:
        pipeline = FieldExtractionPipeline(config_path=args.config)
        setup_logging(args.log_level or pipeline.config.log_level)
        fields = pipeline.load_fields(args.fields)
    except (ValidationError, ValueError) as e:
        print(f"Error loading configuration: {e}")
        sys.exit(1)

    try:
        pages, tables = load_document(args.input)
        values = pipeline.process_pages(pages, fields, tables)
    except (re.error, ValueError, KeyError) as e:
        print(f"Error processing document: {e}")
        sys.exit(1)

    output = json.dumps(values, ensure_ascii=False, indent=2)
    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(output)
        print(f"✓ Values written to {args.output}")
    else:
        print(output)

    found = sum(1 for value in values.values() if value)
    print(f"Fields found: {found}/{len(values)}", file=sys.stderr)
    sys.exit(0)


if __name__ == "__main__":
    main()
