"""Push-based snapshot fabric.

Every channel carries full-state snapshots, never deltas. A snapshot is
``{'channel', 'seq', 'data'}`` where ``seq`` grows by one per publication on
that channel, so a client can drop anything older than what it already
has. Publication goes out to Socket.IO rooms named after the channel and to
in-process subscriptions.

Remote clients attach through ``deliver_latest`` (see ``socketio_events``).
``SnapshotHub.subscribe`` is the in-process form of the same stream: an
iterator of snapshots for code running inside the server process, such as
workers or tests, that want to fold over a channel without a socket.
"""

import queue
import threading
from collections import defaultdict
from typing import Callable, Dict, List, Optional

from wager import socketio
from wager.models import Category, Player, Question
from wager.services.games.ledger import list_submissions
from wager.services.games.rounds import get_game

NAMESPACE = '/ws'
ROUND_PREFIX = 'round_'


class Subscription:
    """Ordered, non-restartable stream of snapshots for one channel."""

    def __init__(self, hub: 'SnapshotHub', channel: str):
        self.hub = hub
        self.channel = channel
        self.last_seq = 0
        self.closed = False
        self._queue: 'queue.Queue[dict]' = queue.Queue()

    def _deliver(self, snapshot: dict) -> None:
        self._queue.put(snapshot)

    def get(self, timeout: Optional[float] = None) -> dict:
        """Block until a snapshot newer than the last one returned arrives.

        Raises ``queue.Empty`` when ``timeout`` elapses first.
        """
        while True:
            snapshot = self._queue.get(timeout=timeout)
            if snapshot['seq'] > self.last_seq:
                self.last_seq = snapshot['seq']
                return snapshot

    def pending(self) -> List[dict]:
        """Drain whatever has been delivered so far without blocking."""
        out = []
        while True:
            try:
                out.append(self.get(timeout=0))
            except queue.Empty:
                return out

    def close(self) -> None:
        self.closed = True
        self.hub._remove(self)

    def __iter__(self):
        return self

    def __next__(self) -> dict:
        if self.closed:
            raise StopIteration
        return self.get()


class SnapshotHub:
    def __init__(self):
        self._lock = threading.Lock()
        self._seq: Dict[str, int] = defaultdict(int)
        self._latest: Dict[str, dict] = {}
        self._subscriptions: Dict[str, List[Subscription]] = defaultdict(list)

    def _publish_locked(self, channel: str, data) -> dict:
        if callable(data):
            data = data()
        self._seq[channel] += 1
        snapshot = {'channel': channel, 'seq': self._seq[channel], 'data': data}
        self._latest[channel] = snapshot
        for sub in list(self._subscriptions.get(channel, ())):
            sub._deliver(snapshot)
        socketio.emit('snapshot', snapshot, to=channel, namespace=NAMESPACE)
        return snapshot

    def publish(self, channel: str, data) -> dict:
        """Push a snapshot. ``data`` may be a callable, evaluated under the lock
        so that a later sequence number never carries an older read."""
        # Held across the emit so seq order is delivery order
        with self._lock:
            return self._publish_locked(channel, data)

    def deliver_latest(self, channel: str, send: Callable[[dict], None],
                       join: Optional[Callable[[], None]] = None,
                       build: Optional[Callable[[], object]] = None) -> dict:
        """Attach a remote subscriber and hand it the channel's latest snapshot.

        ``join`` (entering the room) and the delivery happen under the publish
        lock, so no newer snapshot can reach the subscriber ahead of this one.
        With nothing published yet, ``build`` produces the first snapshot and
        it goes out to the room, which the subscriber has just joined.
        """
        with self._lock:
            if join is not None:
                join()
            snapshot = self._latest.get(channel)
            if snapshot is None and build is not None:
                return self._publish_locked(channel, build)
            if snapshot is not None:
                send(snapshot)
            return snapshot

    def latest(self, channel: str) -> Optional[dict]:
        with self._lock:
            return self._latest.get(channel)

    def subscribe(self, channel: str) -> Subscription:
        sub = Subscription(self, channel)
        with self._lock:
            self._subscriptions[channel].append(sub)
            if channel in self._latest:
                sub._deliver(self._latest[channel])
        return sub

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            subs = self._subscriptions.get(sub.channel, [])
            if sub in subs:
                subs.remove(sub)

    def reset(self) -> None:
        with self._lock:
            self._seq.clear()
            self._latest.clear()
            self._subscriptions.clear()


hub = SnapshotHub()


def round_channel(round_number: int) -> str:
    return f"{ROUND_PREFIX}{round_number}"


def _game_data():
    game = get_game()
    return game.to_dict() if game else None


def _players_data():
    players = Player.query.order_by(Player.score.desc(), Player.name).all()
    return [p.to_dict() for p in players]


def _categories_data():
    return [c.to_dict() for c in Category.query.order_by(Category.name).all()]


def _questions_data():
    return [q.to_dict() for q in Question.query.order_by(Question.category_name, Question.term).all()]


def _round_data(round_number: int):
    game = get_game()
    entries = list_submissions(round_number, game_key=game.game_key) if game else []
    return {
        'game_key': game.game_key if game else None,
        'round': round_number,
        'submissions': [e.to_dict() for e in entries],
    }


BUILDERS: Dict[str, Callable[[], object]] = {
    'game': _game_data,
    'players': _players_data,
    'categories': _categories_data,
    'questions': _questions_data,
}


def parse_round(channel: str) -> Optional[int]:
    if not channel.startswith(ROUND_PREFIX):
        return None
    suffix = channel[len(ROUND_PREFIX):]
    return int(suffix) if suffix.isdigit() else None


def is_known_channel(channel) -> bool:
    return isinstance(channel, str) and (channel in BUILDERS or parse_round(channel) is not None)


def build_snapshot_data(channel: str):
    round_number = parse_round(channel)
    if round_number is not None:
        return _round_data(round_number)
    return BUILDERS[channel]()


def publish_channel(channel: str) -> dict:
    """Read the channel's current state from the store and push it."""
    return hub.publish(channel, lambda: build_snapshot_data(channel))


def deliver_latest(channel: str, send, join=None) -> dict:
    """Latest snapshot for a (re)subscribing client, built on first use."""
    return hub.deliver_latest(channel, send, join=join, build=lambda: build_snapshot_data(channel))


def publish(*channels: str) -> None:
    for channel in channels:
        publish_channel(channel)


def publish_round(round_number: int) -> None:
    publish_channel(round_channel(round_number))

