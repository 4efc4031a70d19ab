# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
Command-line interface for sf2sfz.

Provides subcommands:
- convert: turn a SoundFont into SFZ documents and WAV samples
- list: show the presets of a SoundFont

This module exposes small entry functions that can be used as console_scripts
entry points (they must be callables taking no arguments).
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


from .converter import SoundFontConverter
from .parser import SoundFontParser


def _build_root_parser():
    p = argparse.ArgumentParser(prog="sf2sfz", description="SoundFont2 to SFZ converter")
    sub = p.add_subparsers(dest="command", required=True)

    c_convert = sub.add_parser("convert", help="Convert a SoundFont file into SFZ instruments")
    c_convert.add_argument("input_file", help="Input SoundFont file path")
    c_convert.add_argument("output_directory", nargs="?", help="Output directory (default: same name as input file)")
    c_convert.add_argument("-f", "--force", action="store_true", help="Force overwrite without confirmation")
    c_convert.add_argument("-z", "--zip", action="store_true", help="Pack the output into a single zip archive")
    c_convert.add_argument("--filter", metavar="TEXT", help="Only convert presets whose name contains TEXT")
    c_convert.add_argument("--base-name", metavar="NAME", help="Prefix for output names (default: input file stem)")

    c_list = sub.add_parser("list", help="List the presets of a SoundFont file")
    c_list.add_argument("input_file", help="Input SoundFont file path")
    c_list.add_argument("--filter", metavar="TEXT", help="Only list presets whose name contains TEXT")

    return p


def _list_presets(sf_path, name_filter=None):
    bank = SoundFontParser(sf_path).parse()

    bank_name = bank.info.get("bank_name")
    if bank_name:
        print(f"{bank_name} (SoundFont {bank.info.get('version', 'N/A')})")

    needle = name_filter.lower() if name_filter else None
    for _, preset in bank.visible_presets():
        if needle and needle not in preset.name.lower():
            continue
        print(f"{preset.bank:03d}:{preset.preset:03d}  {preset.name}")


def main(argv=None):
    """
    Generic entry point for `python -m sf2sfz` or package-level CLI.

    Returns exit code (0 on success).
    """
    argv = list(argv) if argv is not None else None
    parser = _build_root_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "convert":
            sf = Path(args.input_file)

            # Determine output directory if not specified
            if args.output_directory:
                outdir = Path(args.output_directory)
            else:
                # Use the stem of the input file
                outdir = sf.with_suffix("")

            # Warn if output directory exists (unless --force is used)
            if outdir.exists() and not args.force:
                response = input(f"Warning: \"{outdir}\" already exists. Overwrite? (y/n): ")
                if response.lower() != "y":
                    print("Conversion cancelled.")
                    return 0

            converter = SoundFontConverter(
                sf,
                outdir,
                base_name=args.base_name,
                preset_filter=args.filter,
                bundle=args.zip,
            )
            converter.convert()

        elif args.command == "list":
            _list_presets(Path(args.input_file), args.filter)

        else:
            parser.print_help()
            return 2
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
