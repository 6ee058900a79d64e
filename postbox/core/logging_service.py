"""
Centralized logging service for Postbox.
Provides structured logging with database storage and easy integration.
"""

import json
import logging
import traceback
from datetime import timedelta
from flask import request, has_request_context, has_app_context, current_app
from .config import Config
from .database import db, utcnow

logger = logging.getLogger('postbox')


class AppLog(db.Model):
    __tablename__ = Config.LOGS_TABLE
    __table_args__ = (
        db.Index('idx_logs_timestamp', 'timestamp'),
        db.Index('idx_logs_level', 'level'),
        db.Index('idx_logs_source', 'source'),
    )

    id = db.Column(db.Integer, primary_key=True)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow)
    level = db.Column(db.String(16), nullable=False)
    source = db.Column(db.String(64), nullable=False)
    message = db.Column(db.Text, nullable=False)
    details = db.Column(db.Text)
    ip_address = db.Column(db.String(64))
    user_agent = db.Column(db.String(500))
    request_path = db.Column(db.String(500))


def configure_logging(app):
    """Set the package logger level from app config and attach a handler once"""
    level = app.config.get('LOG_LEVEL', Config.LOG_LEVEL)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'))
        logger.addHandler(handler)


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def _db_logging_enabled():
        return has_app_context() and current_app.config.get('DB_LOGGING', Config.DB_LOGGING)

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        user_agent = request.headers.get('User-Agent', '')[:500]
        return ip_address, user_agent, request.path

    @staticmethod
    def log(level, source, message, details=None):
        """
        Log a message to the console logger and, when enabled, the database

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (newsletters, api, system, etc.)
            message (str): Main log message
            details (str/dict): Additional details (will be JSON-encoded if dict)
        """
        level = level.upper()
        logging.getLogger(f'postbox.{source}').log(getattr(logging, level, logging.INFO), message)

        if not LoggingService._db_logging_enabled():
            return

        if isinstance(details, dict):
            details = json.dumps(details, indent=2, default=str)

        ip_address, user_agent, request_path = LoggingService._get_request_context()

        try:
            # Own connection so a log write never commits the request's session
            with db.engine.begin() as conn:
                conn.execute(AppLog.__table__.insert().values(
                    timestamp=utcnow(),
                    level=level,
                    source=source,
                    message=message,
                    details=details,
                    ip_address=ip_address,
                    user_agent=user_agent,
                    request_path=request_path,
                ))
        except Exception as e:
            # Fallback to console logging if database fails
            logger.warning(f"Logging service error: {e}")
            if details:
                logger.warning(f"Details: {details}")

    @staticmethod
    def info(source, message, details=None):
        """Log info message"""
        LoggingService.log('INFO', source, message, details)

    @staticmethod
    def error(source, message, details=None):
        """Log error message"""
        LoggingService.log('ERROR', source, message, details)

    @staticmethod
    def log_api_call(source, endpoint, method='GET', status_code=200, details=None):
        """Log API calls"""
        message = f"API {method} {endpoint} - Status: {status_code}"
        level = 'INFO' if 200 <= status_code < 400 else 'WARNING' if status_code < 500 else 'ERROR'
        LoggingService.log(level, source, message, details)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @staticmethod
    def get_recent_logs(limit=100, level=None, source=None):
        """Most recent log entries, newest first"""
        query = AppLog.query
        if level:
            query = query.filter(AppLog.level == level.upper())
        if source:
            query = query.filter(AppLog.source == source)
        return query.order_by(AppLog.timestamp.desc(), AppLog.id.desc()).limit(limit).all()

    @staticmethod
    def cleanup_old_logs(days_to_keep=None):
        """Clean up old log entries"""
        if days_to_keep is None:
            days_to_keep = current_app.config.get('LOG_RETENTION_DAYS', Config.LOG_RETENTION_DAYS)
        cutoff = utcnow() - timedelta(days=days_to_keep)

        deleted_count = AppLog.query.filter(AppLog.timestamp < cutoff).delete()
        db.session.commit()

        LoggingService.info('system', f"Cleaned up {deleted_count} old log entries")
        return deleted_count
