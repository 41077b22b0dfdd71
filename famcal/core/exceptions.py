from fastapi import HTTPException, status

class CalendarError(HTTPException):
    """HTTP error with a fixed status code and a default detail per subclass."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Calendar error"

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)

class ValidationError(CalendarError):
    """Input passed schema validation but conflicts with stored data."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid calendar data"

class AuthenticationError(CalendarError):
    """The acting family member could not be identified."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unknown family member"

class PermissionDenied(CalendarError):
    """The acting member's role does not allow the change."""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Only parents can manage the calendar"

class ResourceNotFound(CalendarError):
    """Missing, in another family, or hidden from the acting child."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"
