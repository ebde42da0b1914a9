import getpass
import os
import sys


def get_system_context(working_dir: str) -> str:
    """Describes the user's environment so the AI can tailor its commands."""
    user = getpass.getuser()
    home = os.path.expanduser("~")

    try:
        files = sorted(os.listdir(working_dir))
    except OSError:
        files = []

    return (
        f"Current working directory: {working_dir}\n"
        f"User: {user}\n"
        f"Operating System: {sys.platform}\n"
        f"Home directory: {home}\n"
        f"Files in current directory: {', '.join(files) if files else 'empty'}"
    )
