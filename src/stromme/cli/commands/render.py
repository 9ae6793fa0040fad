"""
Strømme render command.

SUMMARY: Resolve a template file against data, query and mixins
"""

from __future__ import annotations

import argparse
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from stromme.cli import OutputFormatter, add_json_flag
from stromme.core.exceptions import StrommeError
from stromme.core.options import RenderOptions, load_options
from stromme.core.template import Stromme
from stromme.core.transformers.mixins import MIXINS_KEY

SUMMARY = "Resolve a template file against data, query and mixins"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument("template", help="Template file to render")
    parser.add_argument(
        "--data",
        type=str,
        help="YAML or JSON file holding the context mapping",
    )
    parser.add_argument(
        "--query",
        type=str,
        default=None,
        help="Query string stored under the 'query' key (e.g. 'tab=home&page=2')",
    )
    parser.add_argument(
        "--mixin",
        action="append",
        default=[],
        metavar="NAME=FILE",
        help="Register a template file as mixin NAME (repeatable)",
    )
    parser.add_argument(
        "--mixins-dir",
        type=str,
        help="Register every file in DIR as a mixin named after its stem",
    )
    parser.add_argument(
        "--options",
        type=str,
        help="YAML file with render options",
    )
    parser.add_argument(
        "--strip-whitespace",
        action="store_true",
        help="Remove all whitespace from the output",
    )
    add_json_flag(parser)


def _load_data(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    data = json.loads(text) if path.suffix.lower() == ".json" else yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Data file must contain a mapping: {path}")
    return data


def _load_mixins(stromme: Stromme, entries: List[str], mixins_dir: Optional[str]) -> Dict[str, Any]:
    mixins: Dict[str, Any] = {}
    if mixins_dir:
        for item in sorted(Path(mixins_dir).iterdir()):
            if item.is_file():
                mixins[item.stem] = stromme.template(item.read_text(encoding="utf-8"))
    for entry in entries:
        name, sep, file = entry.partition("=")
        if not sep or not name or not file:
            raise ValueError(f"Invalid --mixin value '{entry}', expected NAME=FILE")
        mixins[name] = stromme.template(Path(file).read_text(encoding="utf-8"))
    return mixins


def main(args: argparse.Namespace) -> int:
    """Render a template file and print the result."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        stromme = Stromme()
        raw = Path(args.template).read_text(encoding="utf-8")
        data = _load_data(Path(args.data)) if args.data else {}

        mixins = _load_mixins(stromme, args.mixin, args.mixins_dir)
        if mixins:
            existing = data.get(MIXINS_KEY) or {}
            if not isinstance(existing, Mapping):
                raise ValueError(f"'{MIXINS_KEY}' in the data file must be a mapping")
            data = {**data, MIXINS_KEY: {**existing, **mixins}}

        options: Optional[RenderOptions] = None
        if args.options:
            options = load_options(args.options, base=stromme.options)
        if args.strip_whitespace:
            options = RenderOptions(strip_whitespace=True)

        output, report = stromme.template(raw).instantiate_with_report(args.query, data, options)
    except StrommeError as exc:
        formatter.error(exc)
        return 1
    except (OSError, ValueError, yaml.YAMLError) as exc:
        formatter.error(exc, error_code="input_error")
        return 1

    formatter.success(
        {"output": output, "report": report.to_dict()},
        output,
    )
    return 0
