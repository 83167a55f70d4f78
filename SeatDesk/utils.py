import logging
from datetime import datetime, timedelta, timezone

import jwt
from django.conf import settings
from django.core.paginator import EmptyPage, PageNotAnInteger, Paginator

logger = logging.getLogger(__name__)


def generate_jwt_token(user_id, email, name, role):
    """
    Generate a JWT access token for the user
    """
    token_lifetime = getattr(settings, 'JWT_ACCESS_TOKEN_LIFETIME', 24)
    issued_at = datetime.now(timezone.utc)

    payload = {
        'user_id': str(user_id),
        'email': email,
        'name': name,
        'role': role,
        'exp': issued_at + timedelta(hours=token_lifetime),
        'iat': issued_at,
        'type': 'access'
    }

    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm='HS256')


def verify_jwt_token(token):
    """
    Verify and decode a JWT token
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=['HS256'])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired access token")
        return None
    except jwt.InvalidTokenError:
        logger.info("Rejected invalid access token")
        return None


def paginate_queryset(queryset, page, rows_per_page):
    """Paginate a queryset and return the requested page of results."""
    paginator = Paginator(queryset, rows_per_page)
    try:
        recs = paginator.page(page)
    except PageNotAnInteger:
        recs = paginator.page(1)
    except EmptyPage:
        recs = paginator.page(paginator.num_pages)

    return {
        'results': list(recs.object_list),
        'total_pages': paginator.num_pages,
        'total_count': paginator.count,
        'has_next': recs.has_next(),
        'has_previous': recs.has_previous(),
    }
