class SocketIOBroadcaster:
    """Delivers session events to the quiz room or one socket.

    Uses ``socketio.emit`` rather than flask_socketio's context-bound ``emit``
    since timer callbacks run outside any request context.
    """

    def __init__(self, socketio, namespace: str = '/ws', room: str = 'default'):
        self.socketio = socketio
        self.namespace = namespace
        self.room = room

    def to_room(self, event: str, payload) -> None:
        self.socketio.emit(event, payload, to=self.room, namespace=self.namespace)

    def to_client(self, connection_id: str, event: str, payload) -> None:
        self.socketio.emit(event, payload, to=connection_id, namespace=self.namespace)
