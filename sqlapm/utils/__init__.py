from sqlapm.utils import dispatch, logging

__all__ = ("dispatch", "logging")
