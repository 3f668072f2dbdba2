"""Error taxonomy for session, queue and relay operations"""


class SignalingError(Exception):
    """Base class for errors reported back to a client"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SessionNotFound(SignalingError):
    def __init__(self, code: str):
        super().__init__("Invalid session code")
        self.code = code


class CodeSpaceExhausted(SignalingError):
    def __init__(self, attempts: int):
        super().__init__(f"Could not allocate a session code after {attempts} attempts")
        self.attempts = attempts


class RecipientUnavailable(SignalingError):
    def __init__(self, conn_id: str):
        super().__init__(f"Recipient {conn_id} is not connected")
        self.conn_id = conn_id


class NotSessionHost(SignalingError):
    def __init__(self, code: str, conn_id: str):
        super().__init__("Only the session host can do that")
        self.code = code
        self.conn_id = conn_id


class AlreadyBound(SignalingError):
    """Connection already belongs to another session or role"""

    def __init__(self, conn_id: str, session_code: str):
        super().__init__(f"Connection already bound to session {session_code}")
        self.conn_id = conn_id
        self.session_code = session_code


class InvalidMessage(SignalingError):
    pass
