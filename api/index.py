"""
Kaimono Cart API - deployment entry point.

Serverless hosts import ``app`` from this module. Session tokens are
issued by the authentication layer, which must ``register`` them on
``sessions``; until it does, session routes answer 400 and admin
routes 403.
"""
from kaimono.app import create_app
from kaimono.auth import SessionRegistry
from kaimono.config import get_settings

settings = get_settings()
sessions = SessionRegistry(ttl_days=settings.session_ttl_days)

app = create_app(settings=settings, sessions=sessions)
