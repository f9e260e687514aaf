from offline_furnaces.core.permissions import IGNORE, PermissionGate, register_permissions


def test_register_permission_is_idempotent():
    gate = PermissionGate()
    gate.register_permission(IGNORE, "OfflineFurnaces")
    gate.register_permission(IGNORE, "SomethingElse")
    assert gate.permission_exists(IGNORE)
    assert gate.grant_permission(7, IGNORE) is True
    assert gate.has_permission(7, IGNORE) is True


def test_has_permission_fails_closed():
    gate = PermissionGate()
    register_permissions(gate, "OfflineFurnaces")
    assert gate.has_permission(7, IGNORE) is False
    assert gate.has_permission(0, IGNORE) is False
    assert gate.has_permission(None, IGNORE) is False
    # Unregistered permission names are never granted
    assert gate.grant_permission(7, "offlinefurnaces.unknown") is False
    assert gate.has_permission(7, "offlinefurnaces.unknown") is False


def test_revoke_permission():
    gate = PermissionGate()
    register_permissions(gate, "OfflineFurnaces")
    gate.grant_permission(7, IGNORE)
    gate.revoke_permission(7, IGNORE)
    assert gate.has_permission(7, IGNORE) is False
    # Revoking from a player with no grants is harmless
    gate.revoke_permission(99, IGNORE)
