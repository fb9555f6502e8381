from src.subtrack.domain.enums import ErrorKind


class SubscriptionError(Exception):
    """
    Классифицированная ошибка домена: вид ошибки + человекочитаемая деталь.
    Всё, что не SubscriptionError, считается внутренней ошибкой.
    """

    def __init__(self, kind: ErrorKind, detail: str = ""):
        self.kind = kind
        self.detail = detail or kind.value.replace("_", " ")
        super().__init__(f"{self.kind.value}: {self.detail}")

    @classmethod
    def invalid_argument(cls, detail: str) -> "SubscriptionError":
        return cls(ErrorKind.INVALID_ARGUMENT, detail)

    @classmethod
    def not_found(cls, detail: str = "not found") -> "SubscriptionError":
        return cls(ErrorKind.NOT_FOUND, detail)

    @classmethod
    def duplicate(cls, detail: str = "duplicate") -> "SubscriptionError":
        return cls(ErrorKind.DUPLICATE, detail)
