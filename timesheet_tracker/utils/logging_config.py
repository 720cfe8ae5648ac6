import logging
import logging.handlers
import time
from datetime import datetime
from pathlib import Path

# Component loggers that also get their own rotating file
COMPONENT_LOG_FILES = {
    "timesheet_tracker.services.task_workflow": "task_workflow.log",
    "timesheet_tracker.services.timesheet_service": "timesheet_service.log",
    "timesheet_tracker.services.submission": "timesheet_service.log",
    "timesheet_tracker.utils.scheduler": "scheduler.log",
}


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter, max_mb: int = 5, backups: int = 3):
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=max_mb * 1024 * 1024,
        backupCount=backups,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(logs_dir: str = "logs", log_level: str = "INFO") -> Path:
    """
    Configure logging for the timesheet tracker.
    Console output plus rotating files: one for the whole app, one per core
    component and an error-only file.
    """
    logs_path = Path(logs_dir)
    logs_path.mkdir(parents=True, exist_ok=True)

    log_format = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    # Console handler (for Docker logs)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(log_format)
    root_logger.addHandler(console_handler)

    root_logger.addHandler(_rotating_handler(logs_path / "app.log", level, log_format, max_mb=10, backups=5))

    # Shared files need one handler instance, not one per logger
    file_handlers = {}
    for logger_name, file_name in COMPONENT_LOG_FILES.items():
        if file_name not in file_handlers:
            file_handlers[file_name] = _rotating_handler(logs_path / file_name, logging.DEBUG, log_format)
        component_logger = logging.getLogger(logger_name)
        component_logger.handlers.clear()
        component_logger.addHandler(file_handlers[file_name])
        component_logger.setLevel(logging.DEBUG)

    root_logger.addHandler(_rotating_handler(logs_path / "errors.log", logging.ERROR, log_format, backups=5))

    # Suppress noisy third-party loggers
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('apscheduler').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info("Logging configuration completed")
    logger.info(f"Log files will be saved to: {logs_path.absolute()}")

    return logs_path


def get_log_files_info(logs_dir: str = "logs"):
    """
    Get information about current log files for debugging.
    """
    logs_path = Path(logs_dir)
    if not logs_path.exists():
        return {"status": "No logs directory found"}

    log_files = {}
    for log_file in logs_path.glob("*.log"):
        try:
            stat = log_file.stat()
            log_files[log_file.name] = {
                "size_mb": round(stat.st_size / (1024 * 1024), 2),
                "modified": datetime.fromtimestamp(stat.st_mtime).strftime("%Y-%m-%d %H:%M:%S")
            }
        except OSError as e:
            log_files[log_file.name] = {"error": str(e)}

    return log_files


def cleanup_old_logs(logs_dir: str = "logs", days_to_keep: int = 30):
    """
    Remove log files (including rotated backups) older than `days_to_keep`.
    Returns the names of the removed files.
    """
    logs_path = Path(logs_dir)
    if not logs_path.exists():
        return []

    cutoff_time = time.time() - (days_to_keep * 24 * 60 * 60)

    cleaned_files = []
    for log_file in logs_path.glob("*.log*"):
        try:
            if log_file.stat().st_mtime < cutoff_time:
                log_file.unlink()
                cleaned_files.append(log_file.name)
        except OSError as e:
            logging.getLogger(__name__).warning(f"Failed to clean up {log_file}: {e}")

    if cleaned_files:
        logging.getLogger(__name__).info(f"Cleaned up old log files: {cleaned_files}")

    return cleaned_files
