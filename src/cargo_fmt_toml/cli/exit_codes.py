# topmark:header:start
#
#   project      : cargo-fmt-toml
#   file         : exit_codes.py
#   file_relpath : src/cargo_fmt_toml/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exit codes for the cargo-fmt-toml CLI.

The CLI aligns with the BSD `sysexits` convention where practical, so that
other tooling can interpret failures consistently. ``--check`` keeps the exit
code ``1`` of the cargo subcommand it replaces when files need formatting.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for the cargo-fmt-toml CLI.

    Attributes:
        SUCCESS: Successful execution (everything formatted, or nothing to do).
        WOULD_CHANGE: ``--check`` found manifests that need formatting.
        DATA_ERROR: A manifest could not be normalized (parse error, duplicate
            key, invalid formatted output). Mirrors BSD ``EX_DATAERR (65)``.
        FILE_NOT_FOUND: The workspace manifest does not exist. Mirrors BSD
            ``EX_NOINPUT (66)``.
        IO_ERROR: I/O error reading/writing a manifest. Mirrors BSD ``EX_IOERR (74)``.
    """

    SUCCESS = 0
    WOULD_CHANGE = 1

    # sysexits-aligned values for better interoperability
    DATA_ERROR = 65  # EX_DATAERR
    FILE_NOT_FOUND = 66  # EX_NOINPUT
    IO_ERROR = 74  # EX_IOERR
