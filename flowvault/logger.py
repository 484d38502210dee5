import logging
import re

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Custom theme for the flow runtime
custom_theme = Theme(
    {
        "info": "dim cyan",
        "warning": "magenta",
        "error": "bold red",
        "vault": "bold yellow",
        "node": "bold blue",
        "runtime": "bold green",
    }
)

console = Console(theme=custom_theme)


class CompactFilter(logging.Filter):
    """Shortens node ids and package prefixes so runtime logs stay readable."""

    # Regex for UUID (standard 8-4-4-4-12 format)
    UUID_PATTERN = re.compile(
        r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.I
    )

    def filter(self, record):
        if not isinstance(record.msg, str):
            return True

        msg = record.msg
        msg = msg.replace("flowvault.runtime.", "runtime.")
        msg = msg.replace("flowvault.nodes.", "node.")
        msg = msg.replace("flowvault.vault.", "vault.")

        # a1e9166a-15f5-4ccf-b2ff-a6a92c37e645 -> a1e9..
        def shorten_uuid(match):
            val = match.group(0)
            return f"{val[:4]}.."

        record.msg = self.UUID_PATTERN.sub(shorten_uuid, msg)
        return True


def setup_global_logger(log_level: str = "INFO"):
    """
    Configures the package logger with Rich output.
    """
    logger = logging.getLogger("flowvault")

    level = getattr(logging, log_level.upper(), logging.INFO)
    logger.setLevel(level)

    # Avoid duplicate handlers
    if not logger.handlers:
        rich_handler = RichHandler(
            console=console,
            rich_tracebacks=True,
            markup=False,
            show_path=False,
            show_time=True,
            omit_repeated_times=True,
            keywords=[
                "vault",
                "node",
                "flow",
                "global",
                "msg",
            ],
        )

        formatter = logging.Formatter("%(message)s", datefmt="[%X]")
        rich_handler.setFormatter(formatter)
        rich_handler.addFilter(CompactFilter())
        logger.addHandler(rich_handler)

    return logger


# Export a module-level logger for simple imports
logger = logging.getLogger("flowvault")
