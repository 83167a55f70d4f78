import logging
import re

from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

from accounts.models import UserActiveSession
from SeatDesk.utils import verify_jwt_token

logger = logging.getLogger(__name__)

# Paths served without a token
PUBLIC_PATHS = (
    '/accounts/login/',
)

# Seat maps are public reads; a token is still honoured when sent
PUBLIC_GET_PATTERNS = (
    re.compile(r'^/inventory/events/[0-9a-f-]+/(seats|availability)/$'),
)


def _unauthorized(message):
    return JsonResponse({
        'success': False,
        'message': message,
        'status_code': 401
    }, status=401)


class ValidateTokenMiddleware(MiddlewareMixin):
    """
    Middleware that blocks requests if JWT access token is not validated
    """

    def is_public(self, request):
        if request.path.startswith(PUBLIC_PATHS):
            return True
        if request.method == 'GET':
            return any(pattern.match(request.path) for pattern in PUBLIC_GET_PATTERNS)
        return False

    def process_request(self, request):
        """
        Resolve the caller from the bearer token, or block the request
        """
        request.validated_user = None
        request.user_payload = None

        auth_header = request.headers.get('Authorization', '')
        if self.is_public(request) and not auth_header:
            return None

        if not auth_header.startswith('Bearer '):
            return _unauthorized('Authorization header required')

        token = auth_header.replace('Bearer ', '', 1).strip()
        if not token:
            return _unauthorized('Access token required')

        payload = verify_jwt_token(token)
        if not payload:
            return _unauthorized('Invalid access token')

        try:
            session = UserActiveSession.objects.select_related('user_id').get(access_token=token)
        except UserActiveSession.DoesNotExist:
            return _unauthorized('Token not found in active sessions')

        user = session.user_id
        if str(user.user_id) != payload.get('user_id'):
            logger.warning("Token subject mismatch for session %s", session.user_active_session_id)
            return _unauthorized('Invalid access token')
        if not user.is_active:
            return _unauthorized('User is inactive')

        # Touch last access time
        session.save(update_fields=['last_access_datetime'])

        request.validated_user = user
        request.user_payload = payload
        return None
