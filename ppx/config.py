"""config file loading and logger setup"""

import sys
import json
import logging
import logging.handlers

from ppx.errors import ConfigurationError

DEFAULT_CONFIG = {
    "log_level": "INFO",
    "log_file": None,
    # smallest interval in ms counted as singletappable,
    # 240 bpm 1/2 ((60000 / 240) / 2)
    "singletap_threshold": 125.0,
    "stacking": True,
}


def load_config(path=None):
    """
    reads a json config file and returns it merged over
    DEFAULT_CONFIG. without a path the defaults are returned.
    """
    config = dict(DEFAULT_CONFIG)
    if path is None:
        return config

    with open(path, encoding='utf-8') as f:
        user_config = json.loads(f.read())

    if not isinstance(user_config, dict):
        raise ConfigurationError(
            "%s: config must be a json object" % path)

    unknown = set(user_config) - set(DEFAULT_CONFIG)
    if unknown:
        raise ConfigurationError(
            "%s: unknown config keys %s" % (
                path, ", ".join(sorted(unknown))))

    config.update(user_config)
    return config


def set_logger(config=None):
    if config is None:
        config = DEFAULT_CONFIG

    logger = logging.getLogger("ppx")
    level = getattr(logging, str(config["log_level"]).upper(), None)
    if not isinstance(level, int):
        raise ConfigurationError(
            "unknown log level %s" % config["log_level"])
    logger.setLevel(level)

    log_format = logging.Formatter(
        '%(asctime)s %(levelname)s %(module)s %(funcName)s %(lineno)d: '
        '%(message)s',
        datefmt="[%d/%m/%Y %H:%M]")

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(log_format)
    stdout_handler.setLevel(level)
    logger.addHandler(stdout_handler)

    if config["log_file"]:
        fhandler = logging.handlers.RotatingFileHandler(
            filename=config["log_file"], encoding='utf-8', mode='a',
            maxBytes=10**7, backupCount=5)
        fhandler.setFormatter(log_format)
        logger.addHandler(fhandler)

    return logger
