from __future__ import annotations

"""Central logging configuration for the label editor.

Import and call :func:`setup_logging` at application start-up.
"""

import copy
import logging
import logging.config
import os
from typing import Any, Dict

from label_editor.config import ConfigManager

__all__ = ["setup_logging"]

_EDITING_LOGGERS = (
    'label_editor.core.services.label_editing_service',
    'label_editor.ui.canvas.drag_drop_coordinator',
)


def setup_logging() -> None:
    """Configure logging for the application using configuration from YAML files."""
    log_dir = os.environ.get("LABEL_EDITOR_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "app.log")

    try:
        logging_config: Dict[str, Any] = copy.deepcopy(ConfigManager().get_logging_config())

        if logging_config.get("version"):
            handlers = logging_config.get("handlers") or {}
            if "file" in handlers:
                handlers["file"]["filename"] = log_file
            logging.config.dictConfig(logging_config)
            logging.info("===== Logging initialised from config files =====")
        else:
            _setup_minimal_logging()
    except (ValueError, TypeError, AttributeError, ImportError) as exc:
        logging.getLogger(__name__).warning("Error loading logging config: %s", exc)
        _setup_minimal_logging()

    _apply_debug_overrides()


def _setup_minimal_logging() -> None:
    """Set up minimal console-only logging when config is unavailable."""
    minimal_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'simple',
                'level': 'INFO',
            },
        },
        'root': {
            'level': 'INFO',
            'handlers': ['console'],
        },
        'loggers': {
            name: {'handlers': ['console'], 'level': 'INFO', 'propagate': False}
            for name in _EDITING_LOGGERS
        },
    }

    logging.config.dictConfig(minimal_config)
    logging.error("===== Logging initialised with minimal fallback (config error) =====")


def _apply_debug_overrides() -> None:
    """Apply environment-driven module-specific debug overrides.

    Supports:
    - LABEL_EDITOR_DEBUG_DND=true  -> DEBUG for editing service and drag/drop
    - LABEL_EDITOR_DEBUG_MODULES=comma,separated,logger,names -> DEBUG for listed loggers
    """
    debug_dnd = os.environ.get('LABEL_EDITOR_DEBUG_DND', '').strip().lower() in {'1', 'true', 'yes', 'on'}
    extra_modules = os.environ.get('LABEL_EDITOR_DEBUG_MODULES', '').strip()
    targets = []
    if debug_dnd:
        targets.extend(_EDITING_LOGGERS)
    if extra_modules:
        targets.extend([m.strip() for m in extra_modules.split(',') if m.strip()])

    for name in targets:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        # Ensure at least one handler emits DEBUG for this logger
        has_debug_handler = any(h.level <= logging.DEBUG for h in logger.handlers)
        if not has_debug_handler:
            h = logging.StreamHandler()
            h.setLevel(logging.DEBUG)
            h.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            logger.addHandler(h)
        logger.info("Debug override active for logger '%s'", name)
