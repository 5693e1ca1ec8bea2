from flask_socketio import join_room, leave_room, emit
from wager.services import sync


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_subscribe(data):
    """Join a channel's room and hand the caller its latest snapshot.

    Clients re-send ``subscribe`` after a reconnect; they get the current
    state back, not the intermediate states they missed.
    """
    channel = (data or {}).get('channel')
    if not sync.is_known_channel(channel):
        emit('error', {'message': f'Unknown channel: {channel}'})
        return
    sync.deliver_latest(
        channel,
        lambda snapshot: emit('snapshot', snapshot),
        join=lambda: join_room(channel),
    )


def handle_unsubscribe(data):
    channel = (data or {}).get('channel')
    if not channel:
        emit('error', {'message': 'channel is required'})
        return
    leave_room(channel)
    emit('unsubscribed', {'channel': channel})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    from wager import socketio

    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('subscribe', handle_subscribe, namespace=namespace)
        socketio.on_event('unsubscribe', handle_unsubscribe, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
