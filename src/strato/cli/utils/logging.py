import logging
import logging.config

import click

DEFAULT_LEVEL = logging.WARNING


def _set_verbosity(ctx, param, count):
    # an unset count still resets the level, so repeated invocations in one
    # process don't inherit each other's level
    logging.getLogger().setLevel(DEFAULT_LEVEL - count * 10)


def _set_debug(ctx, param, debug):
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)


def debug_option(func):
    return click.option(
        "-d",
        "--debug",
        is_flag=True,
        expose_value=False,
        callback=_set_debug,
        help="Debug mode [off]",
    )(func)


def verbosity(func):
    """``-v`` counter plus ``-d``; ``-v`` is eager so ``-d`` always wins"""
    func = debug_option(func)
    return click.option(
        "-v",
        "--verbose",
        count=True,
        is_eager=True,
        expose_value=False,
        callback=_set_verbosity,
        help="Increase logging level. Can be specified multiple times.",
    )(func)


def configure(level=DEFAULT_LEVEL):
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "click": {"class": "strato.cli.utils.logging_classes.ClickFormatter"},
            },
            "handlers": {
                "cli": {
                    "class": "strato.cli.utils.logging_classes.ClickHandler",
                    "formatter": "click",
                },
            },
            "loggers": {"strato": {"handlers": ["cli"], "propagate": False}},
            "root": {"level": level},
        },
    )


configure()
getLogger = logging.getLogger  # noqa: N816
