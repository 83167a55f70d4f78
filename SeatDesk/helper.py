import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from SeatDesk.context import Actor
from SeatDesk.exceptions import ErrorCode

logger = logging.getLogger(__name__)

DOMAIN_ERROR_STATUS = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCode.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class BaseAPIClass(APIView):
    """
    Base API class that provides common response handling methods
    for all API endpoints in the application.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.success = True
        self.message = None
        self.code = status.HTTP_200_OK
        self.custom_code = None
        self.exceptionObj = None
        self.data = {}

    def get_actor(self, request):
        """
        Build the explicit caller context from the user the middleware resolved
        """
        user = getattr(request, 'validated_user', None)
        if user is None:
            return None
        return Actor.from_user(user)

    def authentication_required(self, custom_code=None):
        self.success = False
        self.message = "Authentication required"
        self.code = status.HTTP_401_UNAUTHORIZED
        self.custom_code = custom_code
        return self.get_response()

    def get_response(self):
        """
        Generate a standardized response
        """
        to_return = {
            "success": self.success,
            "message": self.message if self.message else "Success",
            "data": self.data,
        }
        if self.custom_code:
            to_return["custom_code"] = self.custom_code

        if not self.success:
            logger.info("Request failed (%s): %s", self.code, to_return["message"])

        return Response(to_return, status=self.code)

    def error_occurred(self, e, custom_code=None, message=None, **kwargs):
        """
        Generate a standardized error response for unexpected failures
        """
        if e is not None:
            logger.error("Unhandled error: %s", e, exc_info=e)
        self.success = False
        self.message = message or self.message or "Internal Server Error"
        self.code = status.HTTP_500_INTERNAL_SERVER_ERROR
        self.custom_code = custom_code if custom_code else self.custom_code
        self.data = kwargs
        self.exceptionObj = e

    def domain_error(self, e, custom_code=None):
        """
        Map a DomainError raised by a service to its HTTP status
        """
        if e.code == ErrorCode.INTERNAL:
            logger.error("Service failure: %s", e, exc_info=e)
        self.success = False
        self.message = e.message
        self.code = DOMAIN_ERROR_STATUS[e.code]
        self.custom_code = custom_code if custom_code else self.custom_code
        self.data = {"error_code": e.code.value}
        self.exceptionObj = e

    def _process_error(self, key, value):
        """
        Process individual error items recursively
        """
        message = ""
        if isinstance(value, list):
            for item in value:
                # If the item is a dictionary or another list, process it recursively
                if isinstance(item, (list, dict)):
                    message += self._process_error(key, item)
                else:
                    message += f"{key} - {item}; "
        elif isinstance(value, dict):
            for sub_key, sub_value in value.items():
                if sub_key == "non_field_errors":
                    message += f"{key} - "
                message += self._process_error(sub_key, sub_value)
        else:
            if key == "non_field_errors":
                message += str(value) + "; "
            else:
                message += f"{key} - {value}; "
        return message

    def serializer_errors(self, errors):
        """
        Process serializer validation errors and format them into a readable message
        """
        message = ""
        for key, value in errors.items():
            message += self._process_error(key, value)

        self.success = False
        self.message = message
        self.code = status.HTTP_400_BAD_REQUEST
