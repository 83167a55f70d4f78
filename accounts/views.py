import logging

from accounts.models import User, UserActiveSession
from accounts.serializers import LoginSerializer
from SeatDesk.helper import BaseAPIClass
from SeatDesk.utils import generate_jwt_token

logger = logging.getLogger(__name__)


class LoginView(BaseAPIClass):
    model_class = User
    login_serializer = LoginSerializer

    def post(self, request):
        try:
            serializer = self.login_serializer(data=request.data)
            if serializer.is_valid():
                email = serializer.validated_data['email'].strip().lower()
                password = serializer.validated_data['password']

                try:
                    user = self.model_class.objects.get(email=email)
                except self.model_class.DoesNotExist:
                    user = None

                if user is None or not user.check_password(password):
                    self.success = False
                    self.message = "Invalid email or password"
                    self.code = 401
                    self.custom_code = 1201
                    return self.get_response()

                if not user.is_active:
                    self.success = False
                    self.message = "User is inactive"
                    self.code = 403
                    self.custom_code = 1203
                    return self.get_response()

                access_token = generate_jwt_token(user.user_id, user.email, user.name, user.role)

                # One active session per user; a new login replaces the token
                session, created = UserActiveSession.objects.get_or_create(
                    user_id=user,
                    defaults={'access_token': access_token}
                )
                if not created:
                    session.access_token = access_token
                    session.save()
                logger.info("User %s logged in", user.user_id)

                self.data = {
                    'user_id': str(user.user_id),
                    'email': user.email,
                    'name': user.name,
                    'role': user.role,
                    'access_token': access_token,
                    'token_type': 'Bearer'
                }
                self.message = "Login successful"
            else:
                self.custom_code = 1204
                self.serializer_errors(serializer.errors)
        except Exception as e:
            self.error_occurred(e, message="Login failed", custom_code=1202)
        return self.get_response()


class LogoutView(BaseAPIClass):
    def post(self, request):
        try:
            user = request.validated_user
            deleted, _ = UserActiveSession.objects.filter(user_id=user).delete()
            self.message = "Logout successful" if deleted else "No active session"
        except Exception as e:
            self.error_occurred(e, message="Logout failed", custom_code=1108)
        return self.get_response()
