"""Flask integration.

Usage:
    idm = IdmExtension()

    def create_app():
        app = Flask(__name__)
        app.config["IDM_SETTINGS"] = load_settings()
        idm.init_app(app)
        return app

    # in a view
    users = idm.idm_service.get_role_user_members("officer")
"""
from __future__ import annotations
import logging
from typing import Optional

from flask import Flask, current_app

from .config import IdmSettings, load_settings
from .core.factory import IdmServiceFactory
from .core.idm_service import IdmService, PublicIdmService

logger = logging.getLogger(__name__)

EXTENSION_KEY = "idm"


class _IdmState:
    """Per-app services, created on first use."""

    def __init__(self, settings: IdmSettings):
        self.settings = settings
        self.factory = IdmServiceFactory.from_settings(settings)
        self._idm_service: Optional[IdmService] = None
        self._public_idm_service: Optional[PublicIdmService] = None

    @property
    def idm_service(self) -> IdmService:
        if self._idm_service is None:
            self._idm_service = self.factory.create_idm_service(
                self.settings.realm,
                self.settings.client_id,
                self.settings.client_secret_resolved,
            )
        return self._idm_service

    @property
    def public_idm_service(self) -> PublicIdmService:
        if self._public_idm_service is None:
            self._public_idm_service = self.factory.create_public_idm_service()
        return self._public_idm_service


class IdmExtension:
    """Registers an IdmServiceFactory on a Flask app."""

    def __init__(self, app: Optional[Flask] = None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        settings = app.config.get("IDM_SETTINGS")
        if settings is None:
            settings = load_settings()
            app.config["IDM_SETTINGS"] = settings
        app.extensions[EXTENSION_KEY] = _IdmState(settings)
        logger.info(f"IDM integration registered for realm {settings.realm}")

    @staticmethod
    def _state() -> _IdmState:
        try:
            return current_app.extensions[EXTENSION_KEY]
        except KeyError:
            raise RuntimeError("IdmExtension.init_app() was not called for this application")

    @property
    def factory(self) -> IdmServiceFactory:
        return self._state().factory

    @property
    def idm_service(self) -> IdmService:
        return self._state().idm_service

    @property
    def public_idm_service(self) -> PublicIdmService:
        return self._state().public_idm_service
