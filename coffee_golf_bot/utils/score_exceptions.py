"""
Custom exceptions for the score system with user-friendly error messages.
"""

class ScoreBotException(Exception):
    """Base exception for score-related errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class AttemptLimitError(ScoreBotException):
    """Raised when a player has used every attempt for a day."""
    def __init__(self, player_id: str, date: str, cap: int):
        self.player_id = player_id
        self.date = date
        self.cap = cap
        super().__init__(
            f"Player {player_id} already has {cap} attempts for {date}",
            f"You've already used all {cap} attempts for {date}. This score won't be counted."
        )

class StorageError(ScoreBotException):
    """Raised when the score document cannot be persisted."""
    def __init__(self, operation: str, details: str = None):
        super().__init__(
            f"Storage error during {operation}: {details}",
            "❌ Storage error occurred. Please try again later."
        )

class ScoreValidationError(ScoreBotException):
    """Raised when user-supplied input fails validation."""
    def __init__(self, reason: str):
        super().__init__(
            f"Validation failed: {reason}",
            f"❌ {reason}"
        )

class TournamentAlreadyActiveError(ScoreBotException):
    """Raised when creating a tournament while another is running."""
    def __init__(self, active_name: str):
        self.active_name = active_name
        super().__init__(
            f"A tournament is already active: {active_name}",
            f"❌ A tournament is already active: **{active_name}**. End it before starting a new one."
        )

class NoActiveTournamentError(ScoreBotException):
    """Raised when an operation needs an active tournament and there is none."""
    def __init__(self):
        super().__init__(
            "No active tournament",
            "❌ There is no active tournament right now."
        )

class TournamentNotFoundError(ScoreBotException):
    """Raised when a tournament name does not exist."""
    def __init__(self, name: str):
        super().__init__(
            f"Tournament '{name}' not found",
            f"❌ Tournament '{name}' not found!"
        )
