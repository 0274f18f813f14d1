#!/usr/bin/env python
# coding: utf-8
"""
============================================================
CONTACTS GRAPH EXTRACT: PIPELINE STEP
============================================================
Reads a leaked contact-list CSV
  (owner_name, owner_phone, contact_name, contact_phone, owner_location)
and emits a directed, weighted phone-number graph.

Outputs (file mode, into the run's step directory):
  - graph.json  : nodes / edges / meta
  - output.json : manifest listing the artifacts for the orchestrator
Inline mode returns the graph JSON instead of writing files.
============================================================
"""

import argparse
import contextlib
import json
import os
import sys
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from errors import ConfigError, ContactGraphError, WriteError
from logger import get_logger, set_level
from models import ContactGraph, StepConfig
from process import extract_graph

logger = get_logger(__name__)

STEP_NAME = "contacts_graph_extract"
GRAPH_FILE = "graph.json"
MANIFEST_FILE = "output.json"

MANIFEST = {
    "artifacts": {
        "graph": {
            "path": GRAPH_FILE,
            "type": "application/json",
        },
    },
}


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

def parse_config(config: Optional[Mapping[str, Any]]) -> StepConfig:
    """Validate the orchestrator's config mapping before any I/O happens."""
    if config is None:
        raise ConfigError("config.leak is required")
    try:
        return StepConfig.model_validate(dict(config))
    except (ValidationError, TypeError, ValueError) as err:
        raise ConfigError(f"config.leak is required: {err}") from err


# ---------------------------------------------------------------------------
# Output delivery
# ---------------------------------------------------------------------------

def dump_graph(graph: ContactGraph) -> str:
    return json.dumps(graph.to_dict(), indent=2, ensure_ascii=False)


def _write_atomic(path: str, payload: str):
    """Write to a temp sibling, then move it into place in one step."""
    temp_file = f"{path}.tmp"
    try:
        with open(temp_file, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(temp_file, path)
    except OSError:
        with contextlib.suppress(OSError):
            os.remove(temp_file)
        raise


def write_outputs(graph: ContactGraph, step_dir: str) -> str:
    """Write graph.json and output.json; on failure leave neither behind."""
    graph_path = os.path.join(step_dir, GRAPH_FILE)
    manifest_path = os.path.join(step_dir, MANIFEST_FILE)

    try:
        os.makedirs(step_dir, exist_ok=True)
        _write_atomic(graph_path, dump_graph(graph))
    except OSError as err:
        raise WriteError(f"failed to write graph artifact: {graph_path}: {err}") from err

    logger.info(f"graph written: {graph_path}")

    try:
        _write_atomic(manifest_path, json.dumps(MANIFEST, indent=2))
    except OSError as err:
        with contextlib.suppress(OSError):
            os.remove(graph_path)
        raise WriteError(f"failed to write manifest: {manifest_path}: {err}") from err

    return graph_path


# ---------------------------------------------------------------------------
# Step entry points
# ---------------------------------------------------------------------------

def run_step(config: Optional[Mapping[str, Any]], step_dir: str, progress: bool = False) -> ContactGraph:
    """File mode: build the graph and write it plus its manifest into step_dir."""
    cfg = parse_config(config)
    graph = extract_graph(cfg.leak, progress=progress)
    write_outputs(graph, step_dir)
    return graph


def run_inline(config: Optional[Mapping[str, Any]], progress: bool = False) -> str:
    """Direct-return mode: build the graph and hand it back serialized."""
    cfg = parse_config(config)
    return dump_graph(extract_graph(cfg.leak, progress=progress))


def _load_config_file(path: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as err:
        raise ConfigError(f"cannot read config file {path}: {err}") from err
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must hold a JSON object")
    return data


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=STEP_NAME,
        description="Build a phone-number contact graph from a leaked contact-list CSV.",
    )
    parser.add_argument("--leak", help="Path to the leak CSV (overrides the config file).")
    parser.add_argument("--config", help="JSON file holding the step config object.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--step-dir",
        default=".",
        help="Directory receiving graph.json and output.json (default: current directory).",
    )
    mode.add_argument(
        "--inline",
        action="store_true",
        help="Print the graph JSON to stdout instead of writing files.",
    )
    parser.add_argument("--progress", action="store_true", help="Show a progress bar.")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL.")
    return parser


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    if args.log_level:
        set_level(args.log_level)

    try:
        config = _load_config_file(args.config) if args.config else {}
        if args.leak is not None:
            config["leak"] = args.leak

        if args.inline:
            sys.stdout.write(run_inline(config, progress=args.progress) + "\n")
        else:
            run_step(config, args.step_dir, progress=args.progress)
    except ContactGraphError as err:
        logger.error(err.message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
