# tests/unit/infrastructure/test_authorizers.py
import pytest

from locale_hub.core.types import Translation, TranslationStatus, WorkflowAction
from locale_hub.infrastructure.authorization import (
    AllowAllAuthorizer,
    StaticRoleAuthorizer,
)


@pytest.fixture
def translation() -> Translation:
    return Translation(
        id="t-1",
        key_id="k-1",
        locale="fr",
        value="Enregistrer",
        status=TranslationStatus.APPROVED,
    )


@pytest.mark.asyncio
async def test_allow_all(translation: Translation) -> None:
    authorizer = AllowAllAuthorizer()
    for action in WorkflowAction:
        assert await authorizer.can_transition("anyone", translation, action)


@pytest.mark.asyncio
async def test_static_roles(translation: Translation) -> None:
    authorizer = StaticRoleAuthorizer({"publish": ["release-bot"]})

    assert await authorizer.can_transition(
        "release-bot", translation, WorkflowAction.PUBLISH
    )
    assert not await authorizer.can_transition(
        "alice", translation, WorkflowAction.PUBLISH
    )
    # 未配置的操作对所有人放行
    assert await authorizer.can_transition("alice", translation, WorkflowAction.APPROVE)


def test_static_roles_rejects_unknown_action() -> None:
    with pytest.raises(ValueError):
        StaticRoleAuthorizer({"delete_everything": ["root"]})
