from logging import Logger, getLogger


class Logged:
    """
    Mixin giving a class a `logger` named after its `_logger_name` attribute
    """
    _logger_name:str = None

    @property
    def logger(self) -> Logger:
        return getLogger(self._logger_name or self.__class__.__module__)


def to_hex(data:bytes) -> str:
    return bytes(data).hex()


def is_hexstring(value:str) -> bool:
    try:
        int(value.replace(' ', ''), 16)
        return True
    except ValueError:
        return False
