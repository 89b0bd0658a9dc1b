"""Base error type for domain packages."""


class DomainError(Exception):
    """
    Base class for errors raised by domain code

    Each subclass carries a stable ``code`` the API layer translates
    into an HTTP status; ``extra`` holds structured details for the caller.
    """

    code = "domain_error"

    def __init__(self, message: str = "", **extra):
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.extra = extra

    @property
    def detail(self) -> str:
        return str(self)

    def to_dict(self) -> dict:
        return {"code": self.code, "detail": self.detail, **self.extra}
