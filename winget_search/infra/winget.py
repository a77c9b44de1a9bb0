import locale
import os
import shlex
import shutil
import subprocess
from typing import Final

WINGET: Final[str] = "winget"


def find_winget_executable() -> str:
    """Finds the winget executable.

    Returns:
        The resolved path, or the bare name when it is not on PATH.
    """
    return shutil.which(WINGET) or WINGET


def quote_executable(executable: str) -> str:
    """Quotes an executable path for the command line of the current platform."""
    if os.name == "nt":
        return subprocess.list2cmdline([executable])
    return shlex.quote(executable)


def build_search_command(term: str, executable: str | None = None) -> str:
    """Builds the `winget search` command line.

    The term is wrapped in double quotes and otherwise passed through
    untouched, so a term containing `"` can break out of the argument.

    Args:
        term: User search text.
        executable: winget path/name. If omitted, it will be auto-detected.

    Returns:
        A command line such as `winget search "power toys"`.
    """
    exe = quote_executable(executable or find_winget_executable())
    return f'{exe} search "{term}"'


def build_install_command(package_id: str, executable: str | None = None) -> str:
    """Builds the `winget install` command line for a package id."""
    exe = quote_executable(executable or find_winget_executable())
    return f"{exe} install {package_id}"


def native_encoding() -> str:
    """Returns the code page console tools write their output in."""
    return locale.getpreferredencoding(False)


def normalize_output(raw: bytes, encoding: str | None = None) -> str:
    """Decodes winget stdout into well-formed text.

    winget writes through the legacy code page of the current locale. The
    bytes are decoded under that code page, then routed through UTF-16 and
    UTF-8 so no lone surrogate or undecodable byte reaches the parser, whose
    slicing counts characters rather than bytes.

    Args:
        raw: Captured stdout bytes.
        encoding: Code page to decode with. Defaults to `native_encoding()`.

    Returns:
        The normalized text.
    """
    text = raw.decode(encoding or native_encoding(), errors="replace")
    utf16 = text.encode("utf-16-le", errors="surrogatepass")
    utf8 = utf16.decode("utf-16-le", errors="replace").encode("utf-8")
    return utf8.decode("utf-8")
