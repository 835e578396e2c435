from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """Entity does not exist, or the caller cannot see it."""

    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ForbiddenError(HTTPException):
    def __init__(self, detail: str = "Not allowed"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: str = "Already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class AlreadyCompanionError(ConflictError):
    def __init__(self):
        super().__init__(detail="This person is already a companion on this trip.")


class InvalidInputError(HTTPException):
    def __init__(self, detail: str = "Invalid input"):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class InvalidDateRangeError(InvalidInputError):
    def __init__(self, detail: str = "End date must be on or after start date."):
        super().__init__(detail=detail)


class UpstreamUnavailableError(HTTPException):
    def __init__(self, detail: str = "Upstream service unavailable"):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
