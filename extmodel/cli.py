"""
extmodel Command Line

Usage:
    extmodel parse app/view/Main.js app/store/Users.js --project app
    extmodel doc --property show --type method --class App.view.Main < comment.txt
    extmodel init-config
"""

import argparse
import json
import sys
from dataclasses import asdict
from typing import Optional

from extmodel.configs import create_default_config, get_config_path, get_full_config, setup_logging
from extmodel.configs.logging import get_logger
from extmodel.exceptions import ConfigurationError
from extmodel.registry import ComponentRegistry
from extmodel.service import ParseService

logger = get_logger("cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="extmodel", description="ExtJS class definition analyzer")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging on stderr")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    commands = parser.add_subparsers(dest="command", required=True)

    parse_cmd = commands.add_parser("parse", help="Extract components from files and print them as JSON")
    parse_cmd.add_argument("files", nargs="+", help="Class definition files")
    parse_cmd.add_argument("--project", default=None, help="Project scope")
    parse_cmd.add_argument("--namespace", default="", help="Workspace namespace")
    parse_cmd.add_argument("--indent", type=int, default=2, help="JSON indent")
    parse_cmd.add_argument("--save", action="store_true", help="Also write the project snapshot")

    doc_cmd = commands.add_parser("doc", help="Render a doc comment read from a file or stdin")
    doc_cmd.add_argument("file", nargs="?", default=None, help="Comment file (stdin if omitted)")
    doc_cmd.add_argument("--property", default="", help="Documented member name")
    doc_cmd.add_argument("--type", dest="p_type", default="unknown", help="Declaration kind (property, cfg, method, ...)")
    doc_cmd.add_argument("--class", dest="component_class", default="", help="Owning class name")
    doc_cmd.add_argument("--private", action="store_true")
    doc_cmd.add_argument("--static", action="store_true")
    doc_cmd.add_argument("--singleton", action="store_true")

    commands.add_parser("init-config", help="Write a default config.yaml")
    return parser


def _run_parse(args: argparse.Namespace, service: ParseService) -> int:
    project = args.project or service.config["default_project"]
    count = service.index_files(args.files, project=project, namespace=args.namespace)
    print(service.registry.dump_json(project, indent=args.indent))
    if args.save:
        service.save_snapshot(project)
    return 0 if count else 1


def _run_doc(args: argparse.Namespace, service: ParseService) -> int:
    if args.file:
        with open(args.file, encoding="utf-8") as f:
            comment = f.read()
    else:
        comment = sys.stdin.read()

    doc = service.parse_doc(
        args.property,
        args.p_type,
        args.component_class,
        is_private=args.private,
        is_static=args.static,
        is_singleton=args.singleton,
        comment=comment,
    )
    print(json.dumps(asdict(doc), indent=2))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(debug=args.debug, log_file=args.log_file)

    if args.command == "init-config":
        if create_default_config():
            print(f"Created {get_config_path()}")
        else:
            print(f"Config already exists: {get_config_path()}")
        return 0

    try:
        config = get_full_config()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    service = ParseService(ComponentRegistry(), config=config)
    if args.command == "parse":
        return _run_parse(args, service)
    return _run_doc(args, service)


if __name__ == "__main__":
    sys.exit(main())
