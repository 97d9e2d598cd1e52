import logging
from sqlalchemy.orm import Session


class BaseService:
    """Common plumbing for services bound to one request-scoped session."""

    def __init__(self, db: Session):
        self.db = db
        self._logger = logging.getLogger(type(self).__module__)

    def log_info(self, message: str, **extra):
        self._logger.info(message, extra=extra or None)

    def log_warning(self, message: str, **extra):
        self._logger.warning(message, extra=extra or None)

    def log_error(self, message: str, **extra):
        self._logger.error(message, extra=extra or None, exc_info=True)
