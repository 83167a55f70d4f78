"""Helpers shared by the test modules."""

from accounts.models import User


def create_user(email, role=User.USER_TYPE.USER, name=None, password="password123"):
    user = User(name=name or email.split("@")[0].title(), email=email, user_type=role)
    user.set_password(password)
    user.save()
    return user


def reload(instance):
    """Fetch a fresh copy; refresh_from_db() would replay enum transitions."""
    return type(instance).objects.get(pk=instance.pk)
