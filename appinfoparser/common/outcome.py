from enum import Enum


class OutcomeKind(Enum):
    OK = 'ok'
    RECOVERABLE = 'recoverable'
    FATAL = 'fatal'


class Outcome(object):
    """Result of a pipeline step which may be tolerated or fatal.

    ``RECOVERABLE`` outcomes carry the value the pipeline continues with, alongside the error
    that was tolerated. ``FATAL`` outcomes carry the exception that aborts the call.
    """

    def __init__(self, kind, value=None, error=None):
        self.kind = kind
        self.value = value
        self.error = error

    @classmethod
    def ok(cls, value):
        return cls(OutcomeKind.OK, value=value)

    @classmethod
    def recoverable(cls, default, error=None):
        return cls(OutcomeKind.RECOVERABLE, value=default, error=error)

    @classmethod
    def fatal(cls, error):
        return cls(OutcomeKind.FATAL, error=error)

    @property
    def is_fatal(self):
        return self.kind is OutcomeKind.FATAL

    def unwrap(self):
        if self.is_fatal:
            cause = getattr(self.error, 'cause', None)
            if isinstance(cause, BaseException):
                raise self.error from cause
            raise self.error
        return self.value

    def __repr__(self):
        return 'Outcome({}, value={!r}, error={!r})'.format(self.kind.value, self.value, self.error)
