from conftest import START, make_room

from Public.Party.Libs.control_lease import (
    acquire_control_lease,
    holds_active_lease,
    release_control_lease,
)


def test_lease_granted_when_free():
    """Test that the first commander gets a two second lease"""
    room = make_room()
    assert acquire_control_lease(room, "bob", START)
    assert room.active_controller_id == "bob"
    assert room.active_controller_until == START + 2.0


def test_lease_denies_other_user_while_valid():
    """Test that a second user is rejected inside the lease window"""
    room = make_room()
    acquire_control_lease(room, "alice", START)

    assert not acquire_control_lease(room, "bob", START + 1.0)
    assert not acquire_control_lease(room, "bob", START + 2.0)
    assert room.active_controller_id == "alice"


def test_lease_renewed_by_holder():
    """Test that the holder's commands extend the lease"""
    room = make_room()
    acquire_control_lease(room, "alice", START)
    assert acquire_control_lease(room, "alice", START + 1.5)
    assert room.active_controller_until == START + 3.5


def test_lease_expires():
    """Test that anyone can take over once the lease has lapsed"""
    room = make_room()
    acquire_control_lease(room, "alice", START)

    assert acquire_control_lease(room, "bob", START + 2.01)
    assert room.active_controller_id == "bob"


def test_custom_lease_duration():
    room = make_room()
    acquire_control_lease(room, "alice", START, lease_duration_ms=500)
    assert acquire_control_lease(room, "bob", START + 0.6)


def test_holds_active_lease():
    """Test the lease check used to skip ambient sync"""
    room = make_room()
    acquire_control_lease(room, "alice", START)

    assert holds_active_lease(room, "alice", START + 1)
    assert not holds_active_lease(room, "bob", START + 1)
    assert not holds_active_lease(room, "alice", START + 3)


def test_release_only_clears_own_lease():
    """Test that leaving clears the lease only for its holder"""
    room = make_room()
    acquire_control_lease(room, "alice", START)

    release_control_lease(room, "bob")
    assert room.active_controller_id == "alice"

    release_control_lease(room, "alice")
    assert room.active_controller_id is None
    assert acquire_control_lease(room, "bob", START + 0.1)
