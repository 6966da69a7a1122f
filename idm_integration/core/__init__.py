"""Core IDM logic

Module Structure:
    - keycloak/       : Keycloak Admin API client and per-resource services
    - model.py        : Domain objects (IdmUser, IdmRole, IdmUsersResponse, PublishedIdmRealm)
    - idm_mapper.py   : Keycloak user → IdmUser mapping (fullName filter + sort)
    - idm_service.py  : IdmService / PublicIdmService façades
    - factory.py      : IdmServiceFactory

Usage Pattern:
    These modules are NOT auto-imported; import explicitly when needed:
        from idm_integration.core.factory import IdmServiceFactory
        from idm_integration.core.keycloak import SearchUsersByAttributesRequest
"""
