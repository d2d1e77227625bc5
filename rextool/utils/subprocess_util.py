import platform
import shlex
import subprocess


def subprocess_kwargs() -> dict:
    """
    Returns a dictionary of keyword arguments for subprocess calls, adding platform-specific
    flags that we want to use consistently.
    """
    kwargs = {}
    if platform.system() == "Windows":
        kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW  # type: ignore
    return kwargs


def split_command(command: str) -> tuple[str, ...]:
    """Split a configured command line into an argv tuple."""
    return tuple(shlex.split(command))


def format_command(argv: tuple[str, ...] | list[str]) -> str:
    """Render an argv as a shell-safe string for messages."""
    return " ".join(shlex.quote(arg) for arg in argv)
