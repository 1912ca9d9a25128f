#!/usr/bin/env python3
"""Command line interface for inspecting and maintaining ConfigVault settings."""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from configvault.__version__ import __version__
from configvault.config import (
    ConfigVaultError,
    SettingsManager,
    TemplateCategory,
    detect_install_state,
)
from configvault.utils.logger import setup_logger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="configvault",
        description="Inspect and maintain application settings and model templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('--data-dir', help="Settings directory (default: per-user data directory)")
    parser.add_argument(
        '--log-level',
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console log level"
    )
    parser.add_argument('--log-file', help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser('state', help="Print the install state without changing anything")
    subparsers.add_parser('show', help="Load (installing/upgrading if needed) and print the settings")

    templates = subparsers.add_parser('templates', help="List templates")
    templates.add_argument(
        '--category',
        choices=[c.value for c in TemplateCategory],
        help="Only list user template names of this category"
    )

    export = subparsers.add_parser('export-template', help="Export a user template to a file")
    export.add_argument('template_id', help="Template id (UUID)")
    export.add_argument('path', help="Target file or directory")

    imp = subparsers.add_parser('import-template', help="Import a template file")
    imp.add_argument('path', help="Template file (.json or .yaml)")

    return parser


def _print_templates(manager: SettingsManager, category: Optional[str]) -> None:
    settings = manager.settings
    if category:
        for name in settings.get_template_names(TemplateCategory(category)):
            print(name)
        return

    for template in settings.templates:
        flags = []
        if template.is_installed:
            flags.append("installed")
        if template.update_available:
            flags.append("update available")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        print(
            f"{template.id}  {template.group.value:<6}  {template.category.value:<17}  "
            f"v{template.file_version}  {template.name}{suffix}"
        )


def main(argv: Optional[List[str]] = None):
    """Console script entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logger("configvault", args.log_level, args.log_file)
    manager = SettingsManager(args.data_dir)

    if args.command == "state":
        print(detect_install_state(manager.paths).value)
        return

    try:
        manager.load_settings()

        if args.command == "show":
            print(json.dumps(manager.settings.to_section(), indent=2, ensure_ascii=False))
        elif args.command == "templates":
            _print_templates(manager, args.category)
        elif args.command == "export-template":
            path = manager.export_template(args.template_id, Path(args.path))
            print(str(path))
        elif args.command == "import-template":
            template = manager.import_template(Path(args.path))
            print(f"Imported {template.name} ({template.id})")

    except ConfigVaultError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
