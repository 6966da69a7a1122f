import pytest

from conftest import kc_user
from idm_integration.core.idm_mapper import IdmUsersMapper
from idm_integration.core.keycloak import SearchUsersByAttributesResponse, UserMappingError
from idm_integration.core.model import Pagination


def test_to_idm_user_copies_fields_and_attributes():
    raw = kc_user("jane_doe", "Jane Doe", user_id="abc", enabled=False, drfo=["123"], hierarchy=["100.200", "101"])
    user = IdmUsersMapper.to_idm_user(raw)
    assert user.id == "abc"
    assert user.username == "jane_doe"
    assert user.full_name == "Jane Doe"
    assert user.enabled is False
    assert user.attributes == {"fullName": ["Jane Doe"], "drfo": ["123"], "hierarchy": ["100.200", "101"]}


def test_to_idm_users_sorts_by_full_name():
    users = IdmUsersMapper.to_idm_users([kc_user("zed", "Zed"), kc_user("ann", "Ann")])
    assert [u.full_name for u in users] == ["Ann", "Zed"]


def test_to_idm_users_sort_is_case_sensitive():
    users = IdmUsersMapper.to_idm_users([kc_user("a", "alice"), kc_user("b", "Bob")])
    assert [u.full_name for u in users] == ["Bob", "alice"]


def test_to_idm_users_filters_users_without_full_name():
    service_account = kc_user("service-account-idm", drfo=["1"])
    no_attributes = kc_user("bare")
    users = IdmUsersMapper.to_idm_users([service_account, kc_user("jane", "Jane Doe"), no_attributes])
    assert [u.username for u in users] == ["jane"]


def test_to_idm_users_missing_attributes_key():
    assert IdmUsersMapper.to_idm_users([{"id": "1", "username": "svc"}]) == []


def test_empty_full_name_list_is_a_mapping_error():
    raw = kc_user("broken")
    raw["attributes"] = {"fullName": []}
    with pytest.raises(UserMappingError, match="broken"):
        IdmUsersMapper.to_idm_users([raw])


def test_to_idm_users_response_passes_pagination_through():
    pagination = Pagination(limit=2, continue_token=1025)
    response = SearchUsersByAttributesResponse(
        users=[kc_user("john_doe", "John Doe"), kc_user("jane_doe", "Jane Doe")],
        pagination=pagination,
    )
    result = IdmUsersMapper.to_idm_users_response(response)
    assert [u.username for u in result.users] == ["jane_doe", "john_doe"]
    assert result.pagination is pagination
    assert result.pagination.continue_token == 1025
