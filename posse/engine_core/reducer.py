"""
Reducer - Applies turn actions to game state.

The reducer is the single point of in-game state mutation.
All turn actions must go through apply_action().

Design principles:
- (state, action) -> ActionResult with a new state; the input is never mutated
- Validates fully before applying
- One handler per action type
- Every applied change is appended to the game log
- Cards are only ever moved, never created or dropped
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import random

from ..config import LifePolicy
from ..errors import Forbidden, InvalidInput, InvalidState, PlayerNotFound
from .action import Action, ActionResult, ActionType
from .state import GamePhase, GameState, PlayerState, RoleName, Zone

logger = logging.getLogger("posse.engine")

# Actions the admin may take without holding a seat
ADMIN_ACTIONS = frozenset({ActionType.CHANGE_LIFE, ActionType.FINISH})


def winning_side(state: GameState) -> str | None:
    """
    Return the side that has won, or None while the game is still open.

    - Sheriff dead, Renegade last one standing: Renegade
    - Sheriff dead otherwise: Bandits
    - Every Bandit and Renegade dead: Sheriff and Deputies
    """
    sheriff = next((p for p in state.players if p.is_sheriff), None)
    outlaws = [
        p for p in state.players
        if p.role.name in (RoleName.BANDIT, RoleName.RENEGADE)
    ]

    if sheriff is not None and not sheriff.is_alive:
        alive = [p for p in state.players if p.is_alive]
        if len(alive) == 1 and alive[0].role.name == RoleName.RENEGADE:
            return "Renegade"
        return "Bandits"

    if outlaws and not any(p.is_alive for p in outlaws):
        return "Sheriff and Deputies"

    return None


@dataclass
class Reducer:
    """
    Reducer applies turn actions to game state.

    Stateless apart from configuration - all game state is in GameState.
    """
    life_policy: LifePolicy = LifePolicy.REJECT
    rng: random.Random = field(default_factory=random.Random)

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with the new state.

        Raises:
            PosseError subclasses when the action is not allowed
        """
        # Finishing twice is a no-op
        if action.action_type == ActionType.FINISH and state.is_finished:
            return ActionResult(new_state=state, changed=False)

        self._validate_action(state, action)

        handler = self._get_handler(action.action_type)
        if not handler:
            raise InvalidInput(f"No handler for action type: {action.action_type}")

        new_state = state.clone()
        changes = handler(new_state, action)
        if not changes:
            return ActionResult(new_state=state, changed=False)

        for change in changes:
            new_state.log(action.actor, action.action_type.value, change)
        logger.info("Game %s: %s", state.id, "; ".join(changes))
        return ActionResult(new_state=new_state, changes=changes)

    def _validate_action(self, state: GameState, action: Action) -> None:
        """Check phase and actor before any handler runs."""
        if state.phase == GamePhase.RECRUITING:
            raise InvalidState("Game has not started yet")
        if state.phase == GamePhase.FINISHED:
            raise InvalidState("Game is over - no actions allowed")

        admin_action = action.actor == state.admin and action.action_type in ADMIN_ACTIONS
        player = state.get_player(action.actor)
        if player is None:
            if not admin_action:
                raise Forbidden(f"{action.actor} is not seated at game {state.id}")
        elif (
            self.life_policy == LifePolicy.ELIMINATE
            and not player.is_alive
            and action.action_type != ActionType.FINISH
            and not admin_action
        ):
            raise InvalidState(f"{action.actor} has been eliminated")

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.CHANGE_LIFE: self._handle_change_life,
            ActionType.MOVE_CARD: self._handle_move_card,
            ActionType.REVEAL_ROLE: self._handle_reveal,
            ActionType.END_TURN: self._handle_end_turn,
            ActionType.FINISH: self._handle_finish,
        }
        return handlers.get(action_type)

    def _require_player(self, state: GameState, name: str | None) -> PlayerState:
        player = state.get_player(name) if name else None
        if player is None:
            raise PlayerNotFound(name or "")
        return player

    def _handle_change_life(self, state: GameState, action: Action) -> list[str]:
        """Handle +1 / -1 life."""
        delta = action.payload.delta
        if delta not in (1, -1):
            raise InvalidInput("Life changes one point at a time (+1 or -1)")

        target = self._require_player(state, action.payload.target_player)
        if action.actor != target.name and action.actor != state.admin:
            raise Forbidden(f"{action.actor} cannot change {target.name}'s life")

        if self.life_policy == LifePolicy.ELIMINATE and not target.is_alive:
            raise InvalidState(f"{target.name} has been eliminated")

        new_life = target.life + delta
        if new_life > target.max_life:
            raise InvalidState(f"{target.name} is already at full life ({target.max_life})")

        if new_life < 0:
            if self.life_policy == LifePolicy.REJECT:
                raise InvalidState(f"{target.name} has no life left to lose")
            new_life = 0

        changes = []
        if new_life == target.life:
            changes.append(f"{target.name} stays at 0 life")
        else:
            changes.append(f"{target.name} {'gains' if delta > 0 else 'loses'} 1 life ({new_life})")
        target.life = new_life

        if self.life_policy == LifePolicy.ELIMINATE and new_life == 0:
            target.is_revealed = True
            changes.append(f"{target.name} is eliminated - role: {target.role.name.value}")

        return changes

    def _handle_move_card(self, state: GameState, action: Action) -> list[str]:
        """
        Handle moving one card between zones.

        Players may always move cards out of their own zones and never out
        of another player's. Taking from a shared pile needs the turn.
        """
        payload = action.payload
        if payload.from_zone is None or payload.to_zone is None:
            raise InvalidInput("Both from_zone and to_zone are required")

        actor = state.get_player(action.actor)
        source, source_owner = self._resolve_zone(
            state, payload.from_zone, payload.from_player or action.actor
        )
        dest, dest_owner = self._resolve_zone(
            state, payload.to_zone, payload.to_player or action.actor
        )

        if source is dest:
            raise InvalidInput("Source and destination are the same zone")

        if source_owner is not None and source_owner != action.actor:
            raise Forbidden(f"{action.actor} cannot take cards from {source_owner}")
        if source_owner is None and not actor.is_active:
            raise Forbidden(f"Not {action.actor}'s turn")

        if payload.from_zone == Zone.UNUSED and not source and state.used_cards:
            # Draw pile is out: shuffle the discard pile back in
            recycled = state.used_cards[:]
            state.used_cards.clear()
            self.rng.shuffle(recycled)
            source.extend(recycled)
            logger.info("Game %s: reshuffled %d discarded cards", state.id, len(recycled))

        if not 0 <= payload.card_index < len(source):
            raise InvalidInput(
                f"No card at index {payload.card_index} in {self._describe(payload.from_zone, source_owner)}"
            )

        card = source.pop(payload.card_index)
        dest.append(card)

        shown = "a card" if payload.to_zone == Zone.HAND else card.label
        return [
            f"{action.actor} moved {shown} from "
            f"{self._describe(payload.from_zone, source_owner)} to "
            f"{self._describe(payload.to_zone, dest_owner)}"
        ]

    def _resolve_zone(self, state: GameState, zone: Zone, owner: str) -> tuple[list, str | None]:
        """Get (card list, owning player name) for a zone reference."""
        if zone.is_player_zone:
            player = self._require_player(state, owner)
            return player.zone(zone), player.name
        return state.pile(zone), None

    @staticmethod
    def _describe(zone: Zone, owner: str | None) -> str:
        if owner is None:
            return f"the {zone.value} pile"
        return f"{owner}'s {zone.value}"

    def _handle_reveal(self, state: GameState, action: Action) -> list[str]:
        """Handle revealing the actor's own role."""
        player = self._require_player(state, action.actor)
        if player.is_revealed:
            return []
        player.is_revealed = True
        return [f"{player.name} revealed their role: {player.role.name.value}"]

    def _handle_end_turn(self, state: GameState, action: Action) -> list[str]:
        """Pass the turn to the next living player in seat order."""
        player = self._require_player(state, action.actor)
        if not player.is_active:
            raise Forbidden(f"Not {action.actor}'s turn")

        seat = state.players.index(player)
        count = len(state.players)
        next_player = None
        for offset in range(1, count + 1):
            candidate = state.players[(seat + offset) % count]
            if candidate.is_alive:
                next_player = candidate
                break

        if next_player is None or next_player is player:
            return [f"{player.name} ends their turn and plays again"]

        player.is_active = False
        next_player.is_active = True
        return [f"{player.name} ends their turn, {next_player.name} is up"]

    def _handle_finish(self, state: GameState, action: Action) -> list[str]:
        """
        Handle ending the game.

        The admin may always finish; seated players only once a side has won.
        """
        winner = winning_side(state)
        if action.actor != state.admin and winner is None:
            raise Forbidden("Only the admin can end a game that is still undecided")

        state.phase = GamePhase.FINISHED
        for p in state.players:
            p.is_revealed = True
            p.is_active = False

        if winner:
            return [f"Game over - {winner} win"]
        return [f"Game ended by {action.actor}"]


def apply_action(
    state: GameState,
    action: Action,
    life_policy: LifePolicy = LifePolicy.REJECT,
) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a reducer with the given life policy and applies the action.
    """
    reducer = Reducer(life_policy=life_policy)
    return reducer.apply(state, action)
