TOGGLE_FLAG_ALIASES = {
    "recurse": "-r",
    "symlinks": "-s",
    "hardlinks": "-H",
    "noempty": "-n",
    "nohidden": "-A",
    "permissions": "-p",
}

TOGGLE_FLAG_CHOICES = list(TOGGLE_FLAG_ALIASES.keys())

TOGGLE_HELP_TEXT = (
    "Toggle a finder switch on or off relative to the defaults (repeatable).\n"
    "Accepts a raw switch (e.g. -r) or one of the aliases:\n"
    "  recurse     : -r  descend into subdirectories\n"
    "  symlinks    : -s  follow symlinked directories\n"
    "  hardlinks   : -H  treat hard links as duplicates\n"
    "  noempty     : -n  exclude zero-length files\n"
    "  nohidden    : -A  exclude hidden files\n"
    "  permissions : -p  don't consider files with different owner/group or permissions duplicates\n"
    "Example:\n"
    "  %(prog)s ~/Photos ~/Backup -t noempty -t recurse"
)

EPILOG_TEXT = """
Examples:
  List duplicates across two folders (recursive by default)
  %(prog)s ~/Photos ~/Backup/Photos

  Same as above, but without descending into subdirectories
  %(prog)s ~/Photos ~/Backup/Photos -t recurse

  Pass extra arguments to the finder and a size filter
  %(prog)s ~/Downloads --args="-n -A" --size 100

  Only print the command that would run
  %(prog)s ~/Downloads --print-command

  Open the listing window
  %(prog)s ~/Downloads --gui
"""


def resolve_toggle_flag(value: str) -> str:
    """Maps an alias to its switch; raw switches pass through unchanged."""
    return TOGGLE_FLAG_ALIASES.get(value.strip().lower(), value.strip())
