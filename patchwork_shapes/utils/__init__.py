"""
Patchwork Shapes - Utilities Package
====================================
Logging helpers shared by the models, codec and renderers.
"""

from patchwork_shapes.utils.logger import (
    JsonFormatter, setup_logging, setup_logger, get_logger,
    LogCapture, log_exception
)

__all__ = [
    'JsonFormatter', 'setup_logging', 'setup_logger', 'get_logger',
    'LogCapture', 'log_exception'
]
