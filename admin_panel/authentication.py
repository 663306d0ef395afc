from rest_framework import authentication, exceptions

from .models import AdminSession


class AdminSessionAuthentication(authentication.BaseAuthentication):
    """
    Authorization: Bearer <token>

    The token issued by the admin-auth login is checked against AdminSession
    on every request; unknown or expired tokens are rejected with 401.
    """
    keyword = "Bearer"

    def authenticate(self, request):
        auth = authentication.get_authorization_header(request).split()
        if not auth or auth[0].lower() != self.keyword.lower().encode():
            return None
        if len(auth) != 2:
            raise exceptions.AuthenticationFailed("Invalid token header.")

        try:
            token = auth[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed("Invalid token header.")

        session = AdminSession.objects.select_related("admin").filter(token=token).first()
        if session is None:
            raise exceptions.AuthenticationFailed("Invalid or expired session.")
        if session.is_expired():
            session.delete()
            raise exceptions.AuthenticationFailed("Invalid or expired session.")

        return (session.admin, session)

    def authenticate_header(self, request):
        return self.keyword
