"""Logger factory for partialuploader modules."""

import logging

ROOT_LOGGER_NAME = 'partialuploader'


def get_logger(name: str) -> logging.Logger:
    """Return a package logger that cooperates with application logging.

    Names are placed under the 'partialuploader' namespace, so
    get_logger('receiver') yields 'partialuploader.receiver'. Records
    propagate to the root logger; when nothing has configured the root
    logger yet, the level defaults to WARNING so library chatter stays
    quiet until setup_logging() or logging.basicConfig() runs.

    Args:
        name: Logger suffix such as 'sender' or 'storage'
    """
    qualified = name if name.startswith(ROOT_LOGGER_NAME) else f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(qualified if name else ROOT_LOGGER_NAME)
    logger.propagate = True

    if not logging.getLogger().handlers:
        logger.setLevel(logging.WARNING)
    return logger
