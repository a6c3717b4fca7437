import logging

from typing import Any, ClassVar

import click


class ClickFormatter(logging.Formatter):
    colors: ClassVar[dict[str, dict[str, Any]]] = {
        "error": {"fg": "red"},
        "exception": {"fg": "red"},
        "critical": {"fg": "red"},
        "debug": {"fg": "blue"},
        "warning": {"fg": "yellow"},
    }
    prefixes: ClassVar[dict[str, str]] = {
        "error": "Error: ",
        "critical": "Error: ",
        "debug": "> [debug] ",
    }

    def format(self, record):
        msg = super().format(record)
        level = record.levelname.lower()
        if level in self.prefixes:
            msg = f"{self.prefixes[level]}{msg}"
        if level in self.colors:
            msg = click.style(msg, **self.colors[level])
        return msg


class ClickHandler(logging.Handler):
    def emit(self, record):
        try:
            msg = self.format(record)
            click.echo(msg, err=True)
        # handleError reports the failure and carries on
        except Exception:  # noqa: BLE001
            self.handleError(record)
