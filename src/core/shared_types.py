"""
Type definitions used across layers
"""

from enum import IntEnum, StrEnum


class Move(IntEnum):
    """Value of a board cell. EMPTY is only ever a default, never a move a player can make."""

    EMPTY = 0
    X = 1
    O = 2


class Network(StrEnum):
    TESTNET = "testnet"
    MAINNET = "mainnet"


class GameStatus(StrEnum):
    OPEN = "waiting for second player"
    IN_PROGRESS = "in progress"
    ENDED = "ended"


class ContractFunction(StrEnum):
    """Functions of the tic-tac-toe contract this client calls."""

    GET_LATEST_GAME_ID = "get-latest-game-id"
    GET_GAME = "get-game"
    CREATE_GAME = "create-game"
    JOIN_GAME = "join-game"
    PLAY = "play"


class PostConditionMode(StrEnum):
    ALLOW = "allow"
    DENY = "deny"
