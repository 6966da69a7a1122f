import pytest
from flask import Flask

from conftest import ADMIN, REALM, SERVER_URL, kc_user
from idm_integration.config import IdmSettings
from idm_integration.core.idm_service import IdmService, PublicIdmService
from idm_integration.ext import IdmExtension


@pytest.fixture()
def app():
    flask_app = Flask(__name__)
    flask_app.config.update(
        TESTING=True,
        IDM_SETTINGS=IdmSettings(
            server_url=SERVER_URL,
            realm=REALM,
            client_id="idm-client",
            client_secret="idm-secret",
        ),
    )
    return flask_app


def test_init_app_registers_factory(app):
    IdmExtension(app)
    state = app.extensions["idm"]
    assert state.factory.server_auth_url == f"{SERVER_URL}/auth"


def test_services_are_created_once_per_app(app):
    idm = IdmExtension()
    idm.init_app(app)
    with app.app_context():
        assert isinstance(idm.idm_service, IdmService)
        assert idm.idm_service is idm.idm_service
        assert isinstance(idm.public_idm_service, PublicIdmService)


def test_idm_service_talks_to_configured_realm(app, keycloak_stub):
    keycloak_stub.add("GET", ADMIN, {"realm": REALM})
    keycloak_stub.add("GET", f"{ADMIN}/roles/officer/users", [kc_user("jane", "Jane Doe")])
    idm = IdmExtension(app)
    with app.app_context():
        members = idm.idm_service.get_role_user_members("officer")
    assert [m.full_name for m in members] == ["Jane Doe"]


def test_missing_init_app(app):
    idm = IdmExtension()
    with app.app_context():
        with pytest.raises(RuntimeError, match="init_app"):
            idm.factory
