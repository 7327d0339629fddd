import pytest
from pydantic import ValidationError

from leaguescope.models.identity import (
    ContextOverride,
    EffectiveScope,
    UserIdentity,
    parse_roles,
)
from leaguescope.types import Role


@pytest.mark.unit
class TestParseRoles:
    def test_known_strings(self) -> None:
        assert parse_roles(["SYSTEM_ADMIN", "team_admin"]) == {Role.SYSTEM_ADMIN, Role.TEAM_ADMIN}

    def test_participant_roles_collapse_to_general_user(self) -> None:
        assert parse_roles(["PLAYER", "COACH", "REFEREE"]) == {Role.GENERAL_USER}

    def test_unknown_roles_dropped(self) -> None:
        assert parse_roles(["WIZARD"]) == frozenset()

    def test_enum_members_pass_through(self) -> None:
        assert parse_roles([Role.LEAGUE_ADMIN]) == {Role.LEAGUE_ADMIN}


@pytest.mark.unit
class TestUserIdentity:
    def test_parses_backend_payload(self) -> None:
        identity = UserIdentity.model_validate(
            {
                "id": "u1",
                "username": "ada",
                "roles": ["LEAGUE_ADMIN"],
                "tenantId": "T1",
                "managingLeagueId": "L1",
                "managingTeamId": None,
            }
        )
        assert identity.roles == {Role.LEAGUE_ADMIN}
        assert identity.tenant_id == "T1"
        assert identity.managing_league_id == "L1"
        assert identity.managing_team_id is None

    def test_nested_team_supplies_league(self) -> None:
        identity = UserIdentity.model_validate(
            {
                "id": "u2",
                "roles": ["TEAM_ADMIN"],
                "tenant": {"id": "T1", "name": "Org"},
                "managingTeam": {"id": "TM1", "leagueId": "L7", "name": "Owls"},
            }
        )
        assert identity.tenant_id == "T1"
        assert identity.managing_team_id == "TM1"
        assert identity.managing_team_league_id == "L7"

    def test_flat_id_wins_over_nested(self) -> None:
        identity = UserIdentity.model_validate(
            {"id": "u3", "managingLeagueId": "L1", "managingLeague": {"id": "L9"}}
        )
        assert identity.managing_league_id == "L1"

    def test_blank_ids_become_none(self) -> None:
        identity = UserIdentity(id="u4", tenant_id="  ", managing_league_id="undefined")
        assert identity.tenant_id is None
        assert identity.managing_league_id is None

    def test_snake_case_construction(self, league_admin: UserIdentity) -> None:
        assert league_admin.has_role(Role.LEAGUE_ADMIN)
        assert not league_admin.has_role(Role.SYSTEM_ADMIN)

    def test_single_role_string_accepted(self) -> None:
        assert UserIdentity(id="u5", roles="TENANT_ADMIN").roles == {Role.TENANT_ADMIN}

    def test_identity_is_frozen(self, tenant_admin: UserIdentity) -> None:
        with pytest.raises(ValidationError):
            tenant_admin.tenant_id = "T2"  # type: ignore[misc]


@pytest.mark.unit
class TestContextOverride:
    def test_from_query_string(self) -> None:
        override = ContextOverride.from_query("?ctxTenantId=T1&ctxLeagueId=L1&ctxSeasonId=S1")
        assert override == ContextOverride(tenant_id="T1", league_id="L1", season_id="S1")

    def test_from_mapping_with_lists(self) -> None:
        override = ContextOverride.from_query({"ctxLeagueId": ["L1", "L2"], "ctxTeamId": "TM1"})
        assert override.league_id == "L1"
        assert override.team_id == "TM1"

    def test_legacy_names_accepted(self) -> None:
        override = ContextOverride.from_query("contextTenantId=T1&contextLeagueId=L1")
        assert override.tenant_id == "T1"
        assert override.league_id == "L1"

    def test_short_name_beats_legacy(self) -> None:
        override = ContextOverride.from_query("contextLeagueId=OLD&ctxLeagueId=NEW")
        assert override.league_id == "NEW"

    def test_blank_and_empty(self) -> None:
        assert ContextOverride.from_query("ctxLeagueId=").is_empty
        assert ContextOverride.from_query(None).is_empty
        assert ContextOverride.from_query("").is_empty


@pytest.mark.unit
class TestEffectiveScope:
    def test_global_scope(self) -> None:
        assert EffectiveScope().is_global
        assert not EffectiveScope(tenant_id="T1").is_global

    def test_missing_fields_in_order(self) -> None:
        scope = EffectiveScope(tenant_id="T1")
        assert scope.missing(("tenant_id", "league_id", "team_id")) == ["league_id", "team_id"]

    def test_as_query_omits_unset(self) -> None:
        assert EffectiveScope(tenant_id="T1", team_id="TM1").as_query() == {
            "tenantId": "T1",
            "teamId": "TM1",
        }
