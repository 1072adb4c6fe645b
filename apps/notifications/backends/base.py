class BaseNotificationBackend:
    """
    Base class for message delivery backends.

    Backends own their connection lifecycle. Callers either use the backend
    as a context manager or call ``open()``/``close()`` explicitly; the
    payment engine never opens or closes connections itself.

    Subclasses must implement ``send_text``. It returns True on delivery and
    False on any delivery failure; it must not raise for transport errors.
    """

    def __init__(self, **kwargs):
        self._opened = False

    def open(self):
        self._opened = True

    def close(self):
        self._opened = False

    @property
    def is_ready(self) -> bool:
        return self._opened

    def send_text(self, phone: str, message: str) -> bool:
        raise NotImplementedError('subclasses of BaseNotificationBackend must provide a send_text() method')

    def status(self) -> dict:
        return {'backend': type(self).__name__, 'is_ready': self.is_ready}

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
