"""
Tests for the reducer.

Tests:
- Phase and actor validation
- Life changes under each life policy
- Card moves and card conservation
- Reveal, end turn, finish
"""

import dataclasses
import random
from collections import Counter

import pytest

from posse.config import LifePolicy
from posse.engine_core import (
    Action,
    ActionPayload,
    ActionType,
    Reducer,
    apply_action,
    winning_side,
)
from posse.engine_core.state import (
    GamePhase,
    GameState,
    PlayerState,
    Role,
    RoleName,
    Zone,
)
from posse.errors import Forbidden, InvalidInput, InvalidState, PlayerNotFound
from posse.games.bang.cards import get_character
from posse.games.bang.setup import build_deck, deal


SEATS = [
    ("bob", RoleName.SHERIFF, "Willy the Kid"),
    ("carol", RoleName.RENEGADE, "El Gringo"),
    ("dave", RoleName.BANDIT, "Black Jack"),
    ("erin", RoleName.BANDIT, "Rose Doolan"),
]


@pytest.fixture
def game() -> GameState:
    """
    An active four-player game administered by alice (who is not seated).

    bob is the Sheriff (5 life) and holds the turn; carol has 3 life.
    The deck is in catalog order.
    """
    deck = build_deck()
    players = []
    for name, role, character_name in SEATS:
        character = get_character(character_name)
        life = character.base_life + (1 if role == RoleName.SHERIFF else 0)
        hand, deck = deal(deck, life)
        players.append(PlayerState(
            name=name,
            role=Role(role),
            character=character,
            life=life,
            is_revealed=role == RoleName.SHERIFF,
            is_active=role == RoleName.SHERIFF,
            cards_in_hand=hand,
        ))
    return GameState(
        id=1,
        admin="alice",
        phase=GamePhase.ACTIVE,
        players=players,
        unused_cards=deck,
    )


@pytest.fixture
def reducer() -> Reducer:
    return Reducer(rng=random.Random(5))


def card_ids(state: GameState) -> Counter:
    return Counter(c.card_id for c in state.all_cards())


class TestActions:
    """Tests for the action factories."""

    def test_payload_carries_only_handler_fields(self):
        names = {f.name for f in dataclasses.fields(ActionPayload)}
        assert names == {
            "target_player", "delta",
            "from_zone", "from_player", "card_index", "to_zone", "to_player",
        }

    def test_move_card_factory(self):
        action = Action.move_card("bob", Zone.HAND, Zone.USED, card_index=2, to_player="erin")

        assert action.action_type == ActionType.MOVE_CARD
        assert action.payload.card_index == 2
        assert action.payload.from_player is None
        assert action.payload.to_player == "erin"


class TestValidation:
    """Tests for checks that run before any handler."""

    def test_recruiting_game_rejects_actions(self, game, reducer):
        game.phase = GamePhase.RECRUITING
        with pytest.raises(InvalidState):
            reducer.apply(game, Action.reveal("carol"))

    def test_finished_game_rejects_actions(self, game, reducer):
        game.phase = GamePhase.FINISHED
        with pytest.raises(InvalidState):
            reducer.apply(game, Action.change_life("bob", "bob", -1))

    def test_unseated_user_rejected(self, game, reducer):
        with pytest.raises(Forbidden):
            reducer.apply(game, Action.reveal("mallory"))

    def test_admin_cannot_move_cards(self, game, reducer):
        with pytest.raises(Forbidden):
            reducer.apply(game, Action.move_card("alice", Zone.UNUSED, Zone.USED))

    def test_input_state_untouched(self, game, reducer):
        before = game.clone()
        result = reducer.apply(game, Action.change_life("bob", "bob", -1))

        assert game == before
        assert result.new_state is not game
        assert result.new_state.get_player("bob").life == 4


class TestChangeLife:
    """Tests for +1 / -1 life."""

    def test_lose_and_gain(self, game, reducer):
        state = reducer.apply(game, Action.change_life("carol", "carol", -1)).new_state
        assert state.get_player("carol").life == 2

        state = reducer.apply(state, Action.change_life("carol", "carol", 1)).new_state
        assert state.get_player("carol").life == 3

    def test_change_is_logged(self, game, reducer):
        result = reducer.apply(game, Action.change_life("dave", "dave", -1))

        assert result.changes == ["dave loses 1 life (3)"]
        entry = result.new_state.logs[-1]
        assert entry.actor == "dave"
        assert entry.action == "change_life"
        assert entry.message == "dave loses 1 life (3)"

    def test_admin_changes_anyone(self, game, reducer):
        state = reducer.apply(game, Action.change_life("alice", "erin", -1)).new_state
        assert state.get_player("erin").life == 3

    def test_player_cannot_change_others(self, game, reducer):
        with pytest.raises(Forbidden):
            reducer.apply(game, Action.change_life("dave", "erin", -1))

    def test_cannot_exceed_starting_life(self, game, reducer):
        with pytest.raises(InvalidState):
            reducer.apply(game, Action.change_life("bob", "bob", 1))

    @pytest.mark.parametrize("delta", [0, 2, -3])
    def test_one_point_at_a_time(self, game, reducer, delta):
        with pytest.raises(InvalidInput):
            reducer.apply(game, Action.change_life("bob", "bob", delta))

    def test_unknown_target(self, game, reducer):
        with pytest.raises(PlayerNotFound):
            reducer.apply(game, Action.change_life("alice", "zed", -1))

    def test_reject_policy_at_zero(self, game):
        game.get_player("carol").life = 0
        with pytest.raises(InvalidState):
            apply_action(game, Action.change_life("carol", "carol", -1), LifePolicy.REJECT)

    def test_clamp_policy_at_zero(self, game):
        game.get_player("carol").life = 0
        result = apply_action(game, Action.change_life("carol", "carol", -1), LifePolicy.CLAMP)

        assert result.new_state.get_player("carol").life == 0
        assert result.changes == ["carol stays at 0 life"]

    def test_clamp_policy_allows_recovery(self, game):
        game.get_player("carol").life = 0
        result = apply_action(game, Action.change_life("carol", "carol", 1), LifePolicy.CLAMP)
        assert result.new_state.get_player("carol").life == 1

    def test_eliminate_policy_reveals_role(self, game):
        game.get_player("carol").life = 1
        result = apply_action(game, Action.change_life("alice", "carol", -1), LifePolicy.ELIMINATE)

        carol = result.new_state.get_player("carol")
        assert carol.life == 0
        assert carol.is_revealed
        assert result.changes[-1] == "carol is eliminated - role: Renegade"

    def test_eliminated_player_is_out(self, game):
        game.get_player("carol").life = 0
        with pytest.raises(InvalidState):
            apply_action(game, Action.change_life("alice", "carol", 1), LifePolicy.ELIMINATE)


class TestEliminatedPlayers:
    """What a player at 0 life may still do."""

    @pytest.fixture
    def dead_dave(self, game):
        game.get_player("dave").life = 0
        return game

    @pytest.mark.parametrize("action", [
        Action.reveal("dave"),
        Action.move_card("dave", Zone.HAND, Zone.USED),
        Action.change_life("dave", "dave", 1),
    ])
    def test_eliminate_policy_shuts_them_out(self, dead_dave, action):
        with pytest.raises(InvalidState):
            apply_action(dead_dave, action, LifePolicy.ELIMINATE)

    def test_eliminated_player_may_finish_decided_game(self, dead_dave):
        for name in ("carol", "erin"):
            dead_dave.get_player(name).life = 0

        result = apply_action(dead_dave, Action.finish("dave"), LifePolicy.ELIMINATE)
        assert result.changes == ["Game over - Sheriff and Deputies win"]

    @pytest.mark.parametrize("policy", [LifePolicy.REJECT, LifePolicy.CLAMP])
    def test_other_policies_keep_them_playing(self, dead_dave, policy):
        result = apply_action(dead_dave, Action.reveal("dave"), policy)
        assert result.new_state.get_player("dave").is_revealed


class TestMoveCard:
    """Tests for moving cards between zones."""

    def test_active_player_draws(self, game, reducer):
        top = game.unused_cards[0]
        result = reducer.apply(game, Action.move_card("bob", Zone.UNUSED, Zone.HAND))

        bob = result.new_state.get_player("bob")
        assert bob.cards_in_hand[-1] == top
        assert len(bob.cards_in_hand) == 6
        assert len(result.new_state.unused_cards) == len(game.unused_cards) - 1

    def test_draw_into_hand_hides_the_card(self, game, reducer):
        result = reducer.apply(game, Action.move_card("bob", Zone.UNUSED, Zone.HAND))
        assert result.changes == ["bob moved a card from the unused pile to bob's hand"]

    def test_discard_names_the_card(self, game, reducer):
        card = game.get_player("dave").cards_in_hand[1]
        result = reducer.apply(
            game, Action.move_card("dave", Zone.HAND, Zone.USED, card_index=1)
        )

        assert result.new_state.used_cards == [card]
        assert result.changes == [f"dave moved {card.label} from dave's hand to the used pile"]

    def test_own_zones_need_no_turn(self, game, reducer):
        result = reducer.apply(game, Action.move_card("carol", Zone.HAND, Zone.INVENTORY))
        carol = result.new_state.get_player("carol")
        assert len(carol.inventory_cards) == 1
        assert len(carol.cards_in_hand) == 2

    def test_shared_pile_needs_turn(self, game, reducer):
        with pytest.raises(Forbidden):
            reducer.apply(game, Action.move_card("carol", Zone.UNUSED, Zone.HAND))

    @pytest.mark.parametrize("zone", [Zone.HAND, Zone.INVENTORY, Zone.PLAYED])
    def test_cannot_take_from_another_player(self, game, reducer, zone):
        """Not even the active player may take from someone else's zones."""
        game.get_player("dave").zone(zone).append(game.unused_cards.pop())
        before = len(game.get_player("dave").zone(zone))

        for actor in ("carol", "bob"):
            with pytest.raises(Forbidden):
                reducer.apply(game, Action.move_card(
                    actor, zone, Zone.HAND, from_player="dave",
                ))
        assert len(game.get_player("dave").zone(zone)) == before

    def test_taking_through_manager_leaves_stored_hand(self, started_game, manager):
        sheriff = started_game.active_player
        victim = next(p for p in started_game.players if p is not sheriff)
        hand_size = len(victim.cards_in_hand)

        with pytest.raises(Forbidden):
            manager.act(started_game.id, Action.move_card(
                sheriff.name, Zone.HAND, Zone.HAND, from_player=victim.name,
            ))

        stored = manager.get_game(started_game.id)
        assert len(stored.get_player(victim.name).cards_in_hand) == hand_size
        assert stored.logs == started_game.logs

    def test_give_card_to_another_player(self, game, reducer):
        result = reducer.apply(game, Action.move_card(
            "carol", Zone.HAND, Zone.INVENTORY, to_player="erin",
        ))
        assert len(result.new_state.get_player("erin").inventory_cards) == 1

    def test_bad_index(self, game, reducer):
        with pytest.raises(InvalidInput):
            reducer.apply(game, Action.move_card("carol", Zone.HAND, Zone.USED, card_index=3))

    def test_empty_pile(self, game, reducer):
        with pytest.raises(InvalidInput):
            reducer.apply(game, Action.move_card("bob", Zone.COMMUNITY, Zone.HAND))

    def test_same_zone(self, game, reducer):
        with pytest.raises(InvalidInput):
            reducer.apply(game, Action.move_card("bob", Zone.HAND, Zone.HAND))

    def test_unknown_player_zone(self, game, reducer):
        with pytest.raises(PlayerNotFound):
            reducer.apply(game, Action.move_card("bob", Zone.HAND, Zone.HAND, to_player="zed"))

    def test_reshuffle_when_draw_pile_is_out(self, game, reducer):
        game.used_cards = game.unused_cards
        game.unused_cards = []
        before = card_ids(game)

        result = reducer.apply(game, Action.move_card("bob", Zone.UNUSED, Zone.HAND))

        state = result.new_state
        assert state.used_cards == []
        assert len(state.unused_cards) == len(game.used_cards) - 1
        assert card_ids(state) == before

    def test_cards_are_conserved(self, game, reducer):
        before = card_ids(game)
        state = game
        moves = [
            Action.move_card("bob", Zone.UNUSED, Zone.HAND),
            Action.move_card("bob", Zone.HAND, Zone.PLAYED),
            Action.move_card("bob", Zone.PLAYED, Zone.USED),
            Action.move_card("bob", Zone.UNUSED, Zone.COMMUNITY),
            Action.move_card("bob", Zone.COMMUNITY, Zone.INVENTORY, to_player="erin"),
            Action.move_card("erin", Zone.INVENTORY, Zone.USED),
        ]
        for action in moves:
            state = reducer.apply(state, action).new_state
            assert card_ids(state) == before
        assert len(state.logs) == len(moves)


class TestReveal:
    """Tests for revealing roles."""

    def test_reveal(self, game, reducer):
        result = reducer.apply(game, Action.reveal("dave"))

        assert result.new_state.get_player("dave").is_revealed
        assert result.changes == ["dave revealed their role: Bandit"]

    def test_reveal_twice_is_noop(self, game, reducer):
        result = reducer.apply(game, Action.reveal("bob"))

        assert not result.changed
        assert result.new_state is game
        assert game.logs == []


class TestEndTurn:
    """Tests for passing the turn."""

    def test_pass_to_next_seat(self, game, reducer):
        state = reducer.apply(game, Action.end_turn("bob")).new_state

        assert state.active_player.name == "carol"
        assert not state.get_player("bob").is_active

    def test_wraps_around(self, game, reducer):
        state = game
        for name in ("bob", "carol", "dave", "erin"):
            state = reducer.apply(state, Action.end_turn(name)).new_state
        assert state.active_player.name == "bob"

    def test_skips_dead_players(self, game, reducer):
        game.get_player("carol").life = 0
        state = reducer.apply(game, Action.end_turn("bob")).new_state
        assert state.active_player.name == "dave"

    def test_only_active_player(self, game, reducer):
        with pytest.raises(Forbidden):
            reducer.apply(game, Action.end_turn("carol"))


class TestFinish:
    """Tests for ending the game."""

    def test_admin_finishes_undecided_game(self, game, reducer):
        result = reducer.apply(game, Action.finish("alice"))

        state = result.new_state
        assert state.phase == GamePhase.FINISHED
        assert all(p.is_revealed for p in state.players)
        assert state.active_player is None
        assert result.changes == ["Game ended by alice"]

    def test_player_cannot_finish_undecided_game(self, game, reducer):
        with pytest.raises(Forbidden):
            reducer.apply(game, Action.finish("dave"))

    def test_player_finishes_decided_game(self, game, reducer):
        game.get_player("bob").life = 0
        result = reducer.apply(game, Action.finish("dave"))

        assert result.new_state.is_finished
        assert result.changes == ["Game over - Bandits win"]

    def test_finish_twice_is_noop(self, game, reducer):
        state = reducer.apply(game, Action.finish("alice")).new_state
        result = reducer.apply(state, Action.finish("alice"))

        assert not result.changed
        assert result.new_state is state


class TestWinningSide:
    """Tests for winning_side()."""

    def test_undecided(self, game):
        assert winning_side(game) is None

    def test_bandits_win(self, game):
        game.get_player("bob").life = 0
        assert winning_side(game) == "Bandits"

    def test_renegade_wins_alone(self, game):
        for name in ("bob", "dave", "erin"):
            game.get_player(name).life = 0
        assert winning_side(game) == "Renegade"

    def test_law_wins(self, game):
        for name in ("carol", "dave", "erin"):
            game.get_player(name).life = 0
        assert winning_side(game) == "Sheriff and Deputies"
