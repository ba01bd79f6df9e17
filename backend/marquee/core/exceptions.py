from fastapi import status

class BaseAppException(Exception):
    """Base exception for application"""
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self):
        """Return error response as dictionary with error code"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "status_code": self.status_code
        }

class UserNotFoundException(BaseAppException):
    """Raised when user is not found"""
    error_code = "USER_NOT_FOUND"

    def __init__(self, message: str = "User not found"):
        super().__init__(message, status.HTTP_404_NOT_FOUND)

class UserAlreadyExistsException(BaseAppException):
    """Raised when user already exists"""
    error_code = "USER_ALREADY_EXISTS"

    def __init__(self, message: str = "User already exists"):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)

class InvalidCredentialsException(BaseAppException):
    """Raised when credentials or tokens are invalid"""
    error_code = "INVALID_CREDENTIALS"

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)

class MovieNotFoundException(BaseAppException):
    """Raised when the catalog has no record for a movie id"""
    error_code = "MOVIE_NOT_FOUND"

    def __init__(self, message: str = "Movie not found"):
        super().__init__(message, status.HTTP_404_NOT_FOUND)

class CatalogUnavailableException(BaseAppException):
    """Raised when the movie catalog cannot be reached or answers with an error"""
    error_code = "CATALOG_UNAVAILABLE"

    def __init__(self, message: str = "Movie catalog unavailable"):
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)

class RemoteUnavailableException(BaseAppException):
    """Raised when the watchlist table cannot be read or written"""
    error_code = "REMOTE_UNAVAILABLE"

    def __init__(self, message: str = "Watchlist storage unavailable"):
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)

class WatchlistEntryExistsException(BaseAppException):
    """Raised when a movie is already on the user's watchlist"""
    error_code = "WATCHLIST_ENTRY_EXISTS"

    def __init__(self, message: str = "Movie is already in the watchlist"):
        super().__init__(message, status.HTTP_409_CONFLICT)

class BookingValidationException(BaseAppException):
    """Raised when a booking step is advanced or confirmed while invalid"""
    error_code = "BOOKING_INVALID"

    def __init__(self, message: str = "Booking details are incomplete"):
        super().__init__(message, status.HTTP_422_UNPROCESSABLE_ENTITY)
