import os
from logging import config, getLevelName, getLogger

LOGGER_NAME = "gregeoip"
LOG_LEVEL = getLevelName(os.getenv("GREGEOIP_LOG_LEVEL", "INFO"))  # DEBUG, WARNING, ERROR

log_config = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "()": "uvicorn.logging.DefaultFormatter",
            "fmt": "%(levelprefix)s %(asctime)s - %(name)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
            "use_colors": None,
        },
    },
    "handlers": {
        "default": {
            "formatter": "default",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        LOGGER_NAME: {"handlers": ["default"], "level": LOG_LEVEL, "propagate": False},
    },
}

# Only the SDK's own logger is configured; host application loggers are left alone.
config.dictConfig(log_config)

logger = getLogger(LOGGER_NAME)
