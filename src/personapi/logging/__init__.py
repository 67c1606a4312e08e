from .logging import get_logger, reset_logger, get_configured_level, log_file_path

__all__ = ["get_logger", "reset_logger", "get_configured_level", "log_file_path"]
