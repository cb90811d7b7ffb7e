import pytest

from relaychat.errors import InvalidName, NameTaken
from relaychat.stores import IdentityRegistry


@pytest.fixture
def registry():
    return IdentityRegistry(max_name_length=10)


class TestJoin:

    def test_join_registers_identity(self, registry):
        identity = registry.join('c1', 'alice')

        assert identity.display_name == 'alice'
        assert identity.status == 'online'
        assert registry.lookup_by_connection('c1') is identity
        assert registry.lookup_by_display_name('alice') is identity
        assert registry.lookup_by_id(identity.id) is identity

    def test_taken_name_leaves_registry_unchanged(self, registry):
        first = registry.join('c1', 'alice')

        with pytest.raises(NameTaken):
            registry.join('c2', 'alice')

        assert registry.snapshot() == [first]
        assert registry.lookup_by_connection('c2') is None

    def test_names_are_case_sensitive(self, registry):
        registry.join('c1', 'alice')
        registry.join('c2', 'Alice')

        assert len(registry) == 2

    @pytest.mark.parametrize('name', ['', '   ', None, 'x' * 11])
    def test_invalid_names(self, registry, name):
        with pytest.raises(InvalidName):
            registry.join('c1', name)
        assert len(registry) == 0

    def test_name_is_trimmed(self, registry):
        assert registry.join('c1', '  bob ').display_name == 'bob'

    def test_identity_ids_are_unique(self, registry):
        a = registry.join('c1', 'alice')
        b = registry.join('c2', 'bob')
        assert a.id != b.id


class TestLeave:

    def test_leave_frees_the_name(self, registry):
        registry.join('c1', 'alice')
        registry.leave('c1')

        assert registry.lookup_by_display_name('alice') is None
        assert registry.join('c2', 'alice').connection == 'c2'

    def test_leave_is_idempotent(self, registry):
        identity = registry.join('c1', 'alice')

        assert registry.leave('c1') is identity
        assert registry.leave('c1') is None
        assert registry.leave('never-joined') is None

    def test_connection_for(self, registry):
        identity = registry.join('c1', 'alice')
        assert registry.connection_for(identity.id) == 'c1'
        registry.leave('c1')
        assert registry.connection_for(identity.id) is None


def test_snapshot_lists_online_identities(registry):
    registry.join('c1', 'alice')
    registry.join('c2', 'bob')
    registry.join('c3', 'carol')
    registry.leave('c2')

    assert sorted(i.display_name for i in registry.snapshot()) == ['alice', 'carol']
