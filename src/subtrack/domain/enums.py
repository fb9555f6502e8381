from enum import StrEnum

class ErrorKind(StrEnum):
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"
