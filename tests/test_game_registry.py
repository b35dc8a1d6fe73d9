from types import SimpleNamespace

from backgammon.services.game_registry import GameRegistry


def session(game_id, finished=False):
    return SimpleNamespace(id=game_id, finished=finished)


def test_add_and_lookup():
    registry = GameRegistry()
    game = session('g1')

    assert registry.add_game(game) is True
    assert registry.add_game(session('g1')) is False
    assert len(registry) == 1
    assert 'g1' in registry
    assert registry.get_by_game_id('g1') is game
    assert registry.get_by_game_id('nope') is None


def test_sid_follows_its_last_game():
    registry = GameRegistry()
    registry.add_game(session('g1'))
    registry.add_game(session('g2'))

    assert registry.associate_sid_to_game('sid-a', 'missing') is False
    assert registry.associate_sid_to_game('sid-a', 'g1') is True
    assert registry.associate_sid_to_game('sid-b', 'g1') is True
    assert registry.watchers('g1') == {'sid-a', 'sid-b'}

    registry.associate_sid_to_game('sid-a', 'g2')
    assert registry.get_by_sid('sid-a').id == 'g2'
    assert registry.watchers('g1') == {'sid-b'}

    assert registry.disassociate_sid('sid-b') == 'g1'
    assert registry.disassociate_sid('sid-b') is None
    assert registry.get_by_sid('sid-b') is None


def test_remove_game_unbinds_watchers():
    events = []
    registry = GameRegistry(lambda event_type, message, **kwargs: events.append(event_type))
    game = session('g1')
    registry.add_game(game)
    registry.associate_sid_to_game('sid-a', 'g1')

    assert registry.remove_game_by_id('g1') is game
    assert registry.remove_game_by_id('g1') is None
    assert registry.get_by_sid('sid-a') is None
    assert registry.watchers('g1') == set()
    assert events == ['REGISTRY_ADD', 'REGISTRY_JOIN', 'REGISTRY_REMOVE']


def test_find_game_ids():
    registry = GameRegistry()
    registry.add_game(session('g1', finished=True))
    registry.add_game(session('g2'))
    registry.add_game(session('g3', finished=True))

    assert sorted(registry.find_game_ids(lambda game: game.finished)) == ['g1', 'g3']
