# backgammon/api/schemas.py

from marshmallow import Schema, fields, pre_load, post_load, ValidationError
from marshmallow.validate import OneOf, Range

from backgammon.game_core.constants import (
    PLAYERS_BY_NAME, HOME, BAR, MIN_PIPS, MAX_PIPS
)

# --- Базовая схема: игрок ---

class PlayerSchema(Schema):
    """
    Базовая схема: поле 'player' ('black' / 'red', регистр не важен)
    после загрузки превращается в Player.
    """
    player = fields.Str(
        required=True,
        validate=OneOf(sorted(PLAYERS_BY_NAME), error="Player must be one of: {choices}."),
        error_messages={"required": "Player is required."}
    )

    @pre_load
    def normalize_player(self, data, **kwargs):
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object.")
        if isinstance(data.get('player'), str):
            data = dict(data)
            data['player'] = data['player'].strip().lower()
        return data

    @post_load
    def to_player(self, data, **kwargs):
        data['player'] = PLAYERS_BY_NAME[data['player']]
        return data


def _slot_field(name):
    return fields.Int(
        required=True,
        strict=True,
        validate=Range(min=HOME, max=BAR, error=f"{name} must be a slot id between {{min}} and {{max}}."),
        error_messages={"required": f"{name} is required."}
    )


# --- Выбор источника ---

class SelectSourceSchema(PlayerSchema):
    source = _slot_field("Source")


# --- Ход: источник + кубик ---

class MoveSchema(PlayerSchema):
    source = _slot_field("Source")
    pips = fields.Int(
        required=True,
        strict=True,
        validate=Range(min=MIN_PIPS, max=MAX_PIPS, error="Die value must be between {min} and {max}."),
        error_messages={"required": "Die value is required."}
    )


# --- Ход выбранной фишкой в слот ---

class DestinationSchema(PlayerSchema):
    destination = _slot_field("Destination")


# --- Создание партии ---

class CreateGameSchema(Schema):
    seed = fields.Int(load_default=None, allow_none=True, strict=True)
