from ..services.exceptions import DomainException, InternalException
from ..frontend.exceptions import FrontendException
import logging
import functools

logger = logging.getLogger(__name__)


def error_handler(func):
    """
    Middleware to handle errors in controllers.

    Domain and settings errors are logged and passed on unchanged,
    anything else is logged and converted to an InternalException.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (DomainException, FrontendException) as e:
            logger.warning(
                f"Domain exception of type {type(e).__name__} occurred. "
                f"Exception info: {e}. "
                f"Custom log message: {e.log_message}",
                exc_info=True,
            )
            raise
        except Exception as e:
            logger.error(
                f"Unexpected error of type {type(e).__name__} occurred. "
                f"Exception info: {e}",
                exc_info=True,
            )
            raise InternalException(
                "An unexpected error occurred. Details logged."
            ) from e

    return wrapper
