"""Lint command for facemetric CLI.

Reports banned terms in a piece of text and shows its sanitized form.
Exit status is 1 when the sanitized text still contains banned terms.
"""

from facemetric.cli.utils import BOLD, DIM, RESET
from facemetric.language import find_banned_terms, sanitize


def run_lint(args):
    text = " ".join(args.text)
    found = find_banned_terms(text)
    cleaned = sanitize(text)
    remaining = find_banned_terms(cleaned)

    if found:
        print(f"{BOLD}Banned terms:{RESET} {', '.join(found)}")
    else:
        print(f"{BOLD}Banned terms:{RESET} none")
    print(f"{BOLD}Sanitized:{RESET} {cleaned}")
    if remaining:
        print(f"{DIM}Still present after sanitizing: {', '.join(remaining)}{RESET}")
        return 1
    return 0
