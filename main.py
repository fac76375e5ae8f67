#
# File: main.py
# Revision: 31
# Description: Replaces the interactive chat loop with a file filtering
# command. Candidate paths come from the command line or stdin; the paths
# that survive the ignore rules are printed one per line.
#

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from config import load_final_config
from logging_config import configure_logging
from utils.errors import IgnoreFileError, get_error_message

STDIN_MARKER = '-'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Filters file paths through .gitignore, .geminiignore and custom ignore rules.")
    parser.add_argument("paths", nargs='*', help="Paths to filter. Reads from stdin when omitted or '-'.")
    parser.add_argument("--root", default=None, help="Project root the ignore files are read from (default: current directory).")
    parser.add_argument("--ignore-file", default=None, help="Name of a custom ignore file to respect in addition to the others.")
    parser.add_argument("--no-git-ignore", action="store_true", help="Do not apply .gitignore rules.")
    parser.add_argument("--no-gemini-ignore", action="store_true", help="Do not apply .geminiignore rules.")
    parser.add_argument("--report", action="store_true", help="Log how many paths were ignored.")
    parser.add_argument("--debug", action="store_true", help="Enable detailed debug logging.")
    return parser


def read_candidate_paths(paths: List[str], stdin: TextIO) -> List[str]:
    """Expands the '-' marker (or an empty list) into the lines of stdin."""
    if not paths:
        paths = [STDIN_MARKER]
    candidates = []
    for p in paths:
        if p == STDIN_MARKER:
            candidates.extend(line.rstrip('\r\n') for line in stdin if line.strip())
        else:
            candidates.append(p)
    return candidates


def main(argv: Optional[List[str]] = None, stdin: TextIO = None, stdout: TextIO = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.debug)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    try:
        config = load_final_config(args)
        file_service = config.get_file_service()
    except IgnoreFileError as e:
        logging.error(get_error_message(e))
        return 1

    candidates = read_candidate_paths(args.paths, stdin)
    report = file_service.filter_files_with_report(candidates, config.get_file_filtering_options())
    for path in report.filtered_paths:
        print(path, file=stdout)
    if args.report:
        logging.info(f"Ignored {report.ignored_count} of {len(candidates)} path(s).")
    return 0


def run():
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == '__main__':
    run()
